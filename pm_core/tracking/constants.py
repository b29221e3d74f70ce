# pm_core/tracking/constants.py
from django.db import models


class TrackingLogicOperator(models.TextChoices):
    AND = "AND", "All conditions (AND)"
    OR = "OR", "Any condition (OR)"


class TrackingOperator(models.TextChoices):
    EQUALS = "equals", "Equals"
    NOT_EQUALS = "not_equals", "Does not equal"
    CONTAINS = "contains", "Contains"
    NOT_CONTAINS = "not_contains", "Does not contain"
    STARTS_WITH = "starts_with", "Starts with"
    ENDS_WITH = "ends_with", "Ends with"
    IS_EMPTY = "is_empty", "Is empty"
    IS_NOT_EMPTY = "is_not_empty", "Is not empty"
    GREATER_THAN = "greater_than", "Greater than"
    LESS_THAN = "less_than", "Less than"


# Operators that never look at Condition.value
VALUE_FREE_OPERATORS = frozenset({TrackingOperator.IS_EMPTY.value, TrackingOperator.IS_NOT_EMPTY.value})


class PartTrackingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETED = "completed", "Completed"
