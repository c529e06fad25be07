"""Errors raised by the schedule validation core.

Every error carries an instructor-facing message. Routes translate the
four families (validation, conflict, not found, ownership) to HTTP codes.
"""

from enum import Enum


class ScheduleError(Exception):
    """Base class for rejected schedule operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ScheduleValidationError(ScheduleError):
    """Malformed, out-of-order or past-dated input."""


class InvalidRangeError(ScheduleValidationError):
    def __init__(self):
        super().__init__('La date de fin doit être postérieure à la date de début')


class PastStartError(ScheduleValidationError):
    def __init__(self):
        super().__init__('La date de début ne peut pas être dans le passé')


class InvalidTimestampError(ScheduleValidationError):
    def __init__(self, value):
        super().__init__(f'Date invalide: {value!r}')
        self.value = value


class RecurrenceRuleRequiredError(ScheduleValidationError):
    def __init__(self):
        super().__init__('La règle de récurrence est requise pour les disponibilités récurrentes')


class InvalidRecurrenceRuleError(ScheduleValidationError):
    def __init__(self, value):
        super().__init__(f'Règle de récurrence invalide: {value!r}')
        self.value = value


class ExpiryNotApplicableError(ScheduleValidationError):
    def __init__(self):
        super().__init__(
            "La date d'expiration n'est pas applicable pour les disponibilités non récurrentes"
        )


class ExpiryInPastError(ScheduleValidationError):
    def __init__(self):
        super().__init__("La date d'expiration doit être postérieure à la date actuelle")


class ExpiryBeforeIntervalError(ScheduleValidationError):
    def __init__(self):
        super().__init__("La date d'expiration doit être postérieure aux dates de début et de fin")


class ConflictKind(str, Enum):
    AVAILABILITY = 'AvailabilityConflict'
    UNAVAILABILITY = 'UnavailabilityConflict'
    APPOINTMENT = 'AppointmentConflict'


CONFLICT_LABELS = {
    ConflictKind.AVAILABILITY: 'Conflit avec les disponibilités existantes',
    ConflictKind.UNAVAILABILITY: 'Conflit avec les indisponibilités existantes',
    ConflictKind.APPOINTMENT: 'Conflit avec les rendez-vous confirmés',
}

CONFLICT_DELIMITER = ', '


class ConflictError(ScheduleError):
    """A valid interval collides with stored entries of one category."""

    kind: ConflictKind

    def __init__(self, conflicts: list[str]):
        self.conflicts = list(conflicts)
        super().__init__(f'{CONFLICT_LABELS[self.kind]}: {CONFLICT_DELIMITER.join(self.conflicts)}')


class AvailabilityConflict(ConflictError):
    kind = ConflictKind.AVAILABILITY


class UnavailabilityConflict(ConflictError):
    kind = ConflictKind.UNAVAILABILITY


class AppointmentConflict(ConflictError):
    kind = ConflictKind.APPOINTMENT


CONFLICT_ERRORS = {
    ConflictKind.AVAILABILITY: AvailabilityConflict,
    ConflictKind.UNAVAILABILITY: UnavailabilityConflict,
    ConflictKind.APPOINTMENT: AppointmentConflict,
}


class NotFoundError(ScheduleError):
    """A referenced instructor, student or entity does not exist."""


class InstructorNotFound(NotFoundError):
    def __init__(self, instructor_id: int):
        super().__init__(f"Instructeur avec l'ID {instructor_id} non trouvé")
        self.instructor_id = instructor_id


class StudentNotFound(NotFoundError):
    def __init__(self, student_id: int):
        super().__init__(f"Élève avec l'ID {student_id} non trouvé")
        self.student_id = student_id


class MeetingPointNotFound(NotFoundError):
    def __init__(self, meeting_point_id: int):
        super().__init__(f"Point de rencontre avec l'ID {meeting_point_id} non trouvé")
        self.meeting_point_id = meeting_point_id


class EntityNotFound(NotFoundError):
    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} avec l'ID {entity_id} non trouvé(e)")
        self.entity = entity
        self.entity_id = entity_id


class OwnershipError(ScheduleError):
    """The entity exists but belongs to another instructor."""


class OwnershipMismatch(OwnershipError):
    def __init__(self, entity: str, entity_id: int, instructor_id: int):
        super().__init__(
            f"{entity} avec l'ID {entity_id} n'appartient pas à l'instructeur {instructor_id}"
        )
        self.entity = entity
        self.entity_id = entity_id
        self.instructor_id = instructor_id
