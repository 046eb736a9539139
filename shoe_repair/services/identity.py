"""
Источник текущего пользователя (сотрудника)
"""

from typing import Protocol


class IdentityProvider(Protocol):
    """Кто выполняет действие. None - пользователь не авторизован"""

    def get_current_actor(self) -> str | None: ...


class StaticIdentityProvider:
    """Фиксированный пользователь (CLI, тесты)"""

    def __init__(self, actor: str | None = None):
        self.actor = actor

    def get_current_actor(self) -> str | None:
        if self.actor and self.actor.strip():
            return self.actor.strip()
        return None
