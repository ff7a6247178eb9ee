from pathlib import Path


class GradeCubeError(Exception):
    """Base class for all gradecube errors."""


class ParameterError(GradeCubeError):
    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(
            f"Cannot load grading parameters from '{path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the file valid JSON with numeric fields (contrast, saturation, temperature, "
            f"tint, shadows, highlights, lift, gamma, gain)?\n"
            f"  Tip: RGB fields accept either {{\"r\": 0.1, \"g\": 0, \"b\": -0.1}} or [0.1, 0, -0.1]."
        )
        self.path = path
        self.detail = detail


class PresetError(GradeCubeError):
    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown preset '{name}'.\n"
            f"  Available: {', '.join(available)}\n"
            f"  Tip: Run `gradecube presets` to list them."
        )
        self.name = name


class ImageLoadError(GradeCubeError):
    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(
            f"Cannot read reference image '{path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the file a PNG, JPEG, TIFF or BMP image that OpenCV can decode?"
        )
        self.path = path
        self.detail = detail


class AnalysisError(GradeCubeError):
    def __init__(self, detail: str) -> None:
        super().__init__(
            f"Image analysis failed.\n"
            f"  Cause: {detail}\n"
            f"  Check: The pixel buffer must be non-empty RGBA bytes of length width * height * 4."
        )
        self.detail = detail


class LUTWriteError(GradeCubeError):
    def __init__(self, output_path: Path, detail: str) -> None:
        super().__init__(
            f"Failed to write LUT file '{output_path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the output directory writable and is there enough disk space?"
        )
        self.output_path = output_path
        self.detail = detail
