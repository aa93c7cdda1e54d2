from datetime import date, datetime


def compact(params: dict) -> dict:
    return {k: v for k, v in params.items() if v is not None}


def to_json_value(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value
