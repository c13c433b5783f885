import random
import string
import time

BASE36 = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits))


def generate_request_number() -> str:
    """BR-<base36 epoch millis>-<5 random base36 chars>"""
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(BASE36, k=5))
    return f"BR-{timestamp}-{suffix}"
