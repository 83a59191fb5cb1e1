# validators.py

def validate_required(field_name, value):
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} must not be empty.")

def validate_threshold(value):
    if value is not None and value < 0:
        raise ValueError("Pass threshold cannot be negative.")
