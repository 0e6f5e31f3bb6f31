"""
Profile helpers.
"""


def calculate_profile_completion(profile):
    """
    Percentage of the twelve tracked profile fields that are filled in.

    Blank strings and missing values count as empty; an allergy list counts
    only when it has at least one entry.
    """
    contact = profile.get('emergencyContact') or {}
    fields = [
        profile.get('name'),
        profile.get('email'),
        profile.get('phone'),
        profile.get('age'),
        profile.get('gender'),
        profile.get('height'),
        profile.get('weight'),
        profile.get('bloodType'),
        True if profile.get('allergies') else None,
        contact.get('name'),
        contact.get('relationship'),
        contact.get('phone'),
    ]

    filled = 0
    for field in fields:
        if field is None:
            continue
        if isinstance(field, str) and not field.strip():
            continue
        filled += 1

    return round(filled / len(fields) * 100)
