from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from salon_admin.backend.config import Settings, load_settings
from salon_admin.backend.providers.registry import AdapterChains, build_default_adapters
from salon_admin.backend.services.action_executor import ActionExecutor
from salon_admin.backend.services.admin_chat_service import AdminChatService
from salon_admin.backend.services.booking_gateway import BookingGateway, SqliteBookingGateway
from salon_admin.backend.services.chat_session_service import InMemorySessionStore, SessionStore
from salon_admin.backend.services.fallback_orchestrator import FallbackOrchestrator
from salon_admin.backend.services.provider_status_service import InMemoryProviderStatusStore, ProviderStatusStore


@dataclass
class AssistantRuntime:
	settings: Settings
	orchestrator: FallbackOrchestrator
	sessions: SessionStore
	gateway: BookingGateway
	executor: ActionExecutor
	chat: AdminChatService


def build_runtime(
	settings: Optional[Settings] = None,
	*,
	chains: Optional[AdapterChains] = None,
	gateway: Optional[BookingGateway] = None,
	sessions: Optional[SessionStore] = None,
	status_store: Optional[ProviderStatusStore] = None,
	today: Callable[[], date] = date.today,
) -> AssistantRuntime:
	"""Wire the assistant from settings; any collaborator can be swapped in."""
	settings = settings or load_settings()
	orchestrator = FallbackOrchestrator(
		chains if chains is not None else build_default_adapters(settings),
		status_store or InMemoryProviderStatusStore(),
	)
	sessions = sessions or InMemorySessionStore(
		ttl_seconds=settings.session_ttl_s,
		max_turns=settings.session_max_turns,
	)
	gateway = gateway or SqliteBookingGateway(settings.db_path)
	executor = ActionExecutor(gateway)
	chat = AdminChatService(
		orchestrator=orchestrator,
		sessions=sessions,
		executor=executor,
		history_turns=settings.history_turns,
		today=today,
	)
	return AssistantRuntime(
		settings=settings,
		orchestrator=orchestrator,
		sessions=sessions,
		gateway=gateway,
		executor=executor,
		chat=chat,
	)
