from marshmallow import ValidationError


def strip_strings(data, fields):
    """Trim surrounding whitespace from the given string fields (in a copy)."""
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for name in fields:
        if isinstance(data.get(name), str):
            data[name] = data[name].strip()
    return data


def validate_not_blank(value: str) -> None:
    if value is None or not value.strip():
        raise ValidationError("Field cannot be blank.")
