"""Job/student matching, search and recommendations."""
