"""Best-effort extraction of grading parameters from generated free text."""
