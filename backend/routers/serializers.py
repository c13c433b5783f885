from pydantic.alias_generators import to_camel


def camelize(data):
    """Recursively rename snake_case dict keys to the camelCase used on the wire."""
    if isinstance(data, dict):
        return {to_camel(key): camelize(value) for key, value in data.items()}
    if isinstance(data, list):
        return [camelize(item) for item in data]
    return data


def donor_summary(donor: dict, *fields: str) -> dict:
    summary = {"id": donor.get("id"), "name": donor.get("full_name")}
    for field in fields:
        summary[field] = donor.get(field)
    return camelize(summary)
