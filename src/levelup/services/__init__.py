"""Service layer exports."""

from . import (
	auth_service,
	dashboard_service,
	reconcile_service,
	talent_service,
	user_service,
)

__all__ = [
	"auth_service",
	"dashboard_service",
	"reconcile_service",
	"talent_service",
	"user_service",
]
