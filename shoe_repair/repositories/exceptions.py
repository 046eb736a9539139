"""
Исключения для работы с репозиториями
"""


class RepositoryError(Exception):
    """Базовое исключение для репозиториев (сбой записи или чтения)"""


class ConcurrentModificationError(RepositoryError):
    """
    Конфликт параллельного изменения

    Возникает, когда запись была изменена другим запросом между
    чтением и условным обновлением (UPDATE ... WHERE status = <прочитанный>).
    """

    def __init__(self, entity_type: str, entity_id: int, expected_state: str | int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_state = expected_state
        super().__init__(
            f"{entity_type} #{entity_id} was modified by another request "
            f"(expected {expected_state}). Please reload and try again."
        )


class EntityNotFoundError(RepositoryError):
    """
    Исключение при отсутствии записи
    """

    def __init__(self, entity_type: str, entity_id: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} #{entity_id} not found")


class IntegrityError(RepositoryError):
    """
    Исключение при нарушении целостности данных
    """
