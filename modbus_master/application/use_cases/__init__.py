"""Use cases for the Modbus master application.

Each use case has a single public ``execute`` method, takes domain
entities as input and returns a result DTO.
"""

from .poll_group_result import PollGroupResult
from .poll_group_use_case import PollGroupUseCase

__all__ = ["PollGroupResult", "PollGroupUseCase"]
