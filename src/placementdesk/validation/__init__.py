"""Registration and input validation rules."""
