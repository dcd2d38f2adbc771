"""Validation helpers shared across apps"""
from rest_framework import serializers

# 0 = Sunday .. 6 = Saturday
MIN_WEEKDAY = 0
MAX_WEEKDAY = 6


def validate_weekdays(days, allow_empty=True):
    """
    Validate a list of weekday integers and return it sorted and deduplicated.

    Raises ``serializers.ValidationError`` for values outside 0..6 or, when
    ``allow_empty`` is False, for an empty list.
    """
    if days is None:
        return days
    if not isinstance(days, (list, tuple)):
        raise serializers.ValidationError('Days must be a list of integers')
    if not days and not allow_empty:
        raise serializers.ValidationError('At least one day must be selected')
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int) or day < MIN_WEEKDAY or day > MAX_WEEKDAY:
            raise serializers.ValidationError(
                'Invalid day value. Days must be between 0 (Sunday) and 6 (Saturday)'
            )
    return sorted(set(days))
