from .dtos import CreateNewsletterCommand, UpdateNewsletterCommand
from .newsletters_use_case import (
    CreateNewsletterUseCase,
    DeleteNewsletterUseCase,
    GetNewsletterUseCase,
    ListNewslettersUseCase,
    UpdateNewsletterUseCase,
)

__all__ = [
    "CreateNewsletterCommand",
    "UpdateNewsletterCommand",
    "ListNewslettersUseCase",
    "GetNewsletterUseCase",
    "CreateNewsletterUseCase",
    "UpdateNewsletterUseCase",
    "DeleteNewsletterUseCase",
]
