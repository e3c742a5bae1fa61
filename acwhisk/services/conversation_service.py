"""
Conversation Service - Direct/group conversations and message requests.

Direct conversations between users who do not follow each other start as a
message request:

    (none) --get_or_create, not mutual--> pending --accept--> accepted
                                          pending --decline--> declined
    (none) --get_or_create, mutual------> request_status = None

Only the non-requesting participant may accept or decline, and accepted and
declined are terminal. A declined conversation is kept in storage but hidden
from both participants' conversation lists; a later get_or_create for the
same pair returns it unchanged. Sending messages is never gated by the
request status.
"""

from typing import Any, Dict, List, Optional

from acwhisk.config import settings
from acwhisk.core.exceptions import (
    AuthorizationError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from acwhisk.core.store import KeyValueStore
from acwhisk.core.utils import generate_id, is_valid_uuid, utc_now_iso
from acwhisk.models.conversation import (
    Conversation,
    ConversationType,
    Message,
    ParticipantRole,
    RequestStatus,
)
from acwhisk.models.user import UserRole
from acwhisk.repositories.conversation_repository import ConversationRepository
from acwhisk.repositories.user_repository import UserRepository
from acwhisk.services.base import BaseService
from acwhisk.services.social_graph_service import SocialGraphService

GROUP_CREATOR_ROLES = {UserRole.INSTRUCTOR.value, UserRole.ADMIN.value}


class ConversationService(BaseService):
    """
    Conversation service coordinating conversation records and both
    participants' conversation indexes.
    """

    def __init__(self, store: KeyValueStore):
        super().__init__(store)
        self.conversation_repo = ConversationRepository(store)
        self.user_repo = UserRepository(store)
        self.social_graph = SocialGraphService(store)

    async def get_or_create(self, actor_id: str, participant_id: str) -> Conversation:
        """
        Return the direct conversation between two users, creating it if needed.

        An existing conversation is returned untouched, whatever its request
        status. A new one is gated as a pending request unless the two users
        follow each other.

        Raises:
            InvalidArgumentError: Malformed participant id, or messaging yourself
            NotFoundError: Participant profile does not exist
        """
        self._log_operation("get_or_create_conversation", actor_id=actor_id, participant_id=participant_id)

        try:
            if not is_valid_uuid(participant_id):
                raise InvalidArgumentError("Invalid participant ID", {"field": "participant_id"})
            if participant_id == actor_id:
                raise InvalidArgumentError("Cannot start a conversation with yourself")
            if not await self.user_repo.exists(participant_id):
                raise NotFoundError("User not found")

            existing = await self.conversation_repo.find_direct_between(actor_id, participant_id)
            if existing is not None:
                self.logger.info(f"Found existing conversation: {existing.id}")
                return existing

            mutual = await self.social_graph.is_mutual_follow(actor_id, participant_id)
            now = utc_now_iso()

            conversation = Conversation(
                id=generate_id(),
                type=ConversationType.DIRECT.value,
                participants=[actor_id, participant_id],
                created_at=now,
                created_by=actor_id,
                request_status=None if mutual else RequestStatus.PENDING.value,
                requested_by=None if mutual else actor_id,
                requested_at=None if mutual else now,
            )

            await self.conversation_repo.save(conversation)
            await self.conversation_repo.add_to_user_index(actor_id, conversation.id)
            await self.conversation_repo.add_to_user_index(participant_id, conversation.id)

            self.logger.info(
                f"Created conversation {conversation.id} "
                f"(request_status={conversation.request_status})"
            )
            return conversation

        except Exception as error:
            self._handle_service_error(error, "create conversation")

    async def accept(self, conversation_id: str, actor_id: str) -> Conversation:
        """Accept a pending message request addressed to the actor."""
        self._log_operation("accept_request", conversation_id=conversation_id, actor_id=actor_id)

        try:
            conversation = await self._get_pending_request(conversation_id, actor_id, "accept")
            conversation.request_status = RequestStatus.ACCEPTED.value
            await self.conversation_repo.save(conversation)
            return conversation

        except Exception as error:
            self._handle_service_error(error, "accept request")

    async def decline(self, conversation_id: str, actor_id: str) -> Conversation:
        """Decline a pending message request addressed to the actor."""
        self._log_operation("decline_request", conversation_id=conversation_id, actor_id=actor_id)

        try:
            conversation = await self._get_pending_request(conversation_id, actor_id, "decline")
            conversation.request_status = RequestStatus.DECLINED.value
            await self.conversation_repo.save(conversation)
            return conversation

        except Exception as error:
            self._handle_service_error(error, "decline request")

    async def send_message(
        self,
        conversation_id: str,
        actor_id: str,
        content: str,
        actor_name: Optional[str] = None,
    ) -> Conversation:
        """
        Append a message and update ``last_message``.

        Raises:
            InvalidArgumentError: Empty message
            NotFoundError: No such conversation
            AuthorizationError: Actor is not a participant
        """
        self._log_operation("send_message", conversation_id=conversation_id, actor_id=actor_id)

        try:
            if not content or not content.strip():
                raise InvalidArgumentError("Message content is required")

            conversation = await self._get_for_participant(conversation_id, actor_id)
            sender = await self.user_repo.get_or_default(actor_id)

            message = Message(
                id=generate_id(),
                sender_id=actor_id,
                sender_name=sender.name or actor_name or "Unknown User",
                content=content,
                created_at=utc_now_iso(),
            )
            conversation.messages.append(message)
            conversation.last_message = message

            await self.conversation_repo.save(conversation)
            return conversation

        except Exception as error:
            self._handle_service_error(error, "send message")

    async def get_conversation(self, conversation_id: str, actor_id: str) -> Conversation:
        """A conversation with its messages, for participants only."""
        self._log_operation("get_conversation", conversation_id=conversation_id, actor_id=actor_id)

        try:
            return await self._get_for_participant(conversation_id, actor_id)

        except Exception as error:
            self._handle_service_error(error, "get conversation")

    async def list_conversations(self, actor_id: str) -> List[Dict[str, Any]]:
        """
        The actor's visible conversations, most recent activity first.

        Only the newest ``conversation_list_limit`` index entries are read.
        Missing records and declined requests are skipped.
        """
        self._log_operation("list_conversations", actor_id=actor_id)

        try:
            ids = await self.conversation_repo.get_user_conversation_ids(actor_id)
            ids = ids[-settings.conversation_list_limit:]

            items = []
            for conversation_id in ids:
                conversation = await self.conversation_repo.get(conversation_id)
                if conversation is None or conversation.is_declined:
                    continue
                if not conversation.has_participant(actor_id):
                    continue
                items.append(await self._summarize(conversation, actor_id))

            items.sort(key=lambda item: item["_activity"] or "", reverse=True)
            for item in items:
                item.pop("_activity")

            pending = sum(
                1
                for item in items
                if item.get("request_status") == RequestStatus.PENDING.value
                and item.get("requested_by") != actor_id
            )
            self.logger.info(
                f"Found {len(items)} conversations for user {actor_id} "
                f"({pending} pending requests)"
            )
            return items

        except Exception as error:
            self._handle_service_error(error, "list conversations")

    async def create_group(
        self,
        actor_id: str,
        name: str,
        description: Optional[str] = None,
        participant_ids: Optional[List[str]] = None,
    ) -> Conversation:
        """
        Create a group conversation. Instructors and admins only.

        The creator becomes ``owner``; every other participant is a ``member``.
        Group conversations never carry message-request state.

        Raises:
            AuthorizationError: Actor is not an instructor or admin
            InvalidArgumentError: Missing name or malformed participant id
        """
        self._log_operation("create_group", actor_id=actor_id)

        try:
            creator = await self.user_repo.get_or_default(actor_id)
            if creator.role not in GROUP_CREATOR_ROLES:
                raise AuthorizationError("Only instructors and admins can create group chats")

            if not name or not name.strip():
                raise InvalidArgumentError("Group name is required")

            members: List[str] = []
            for participant_id in participant_ids or []:
                if not is_valid_uuid(participant_id):
                    raise InvalidArgumentError(
                        "Invalid participant ID", {"participant_id": participant_id}
                    )
                if participant_id != actor_id and participant_id not in members:
                    members.append(participant_id)

            roles = {actor_id: ParticipantRole.OWNER.value}
            roles.update({member: ParticipantRole.MEMBER.value for member in members})

            conversation = Conversation(
                id=generate_id(),
                type=ConversationType.GROUP.value,
                name=name.strip(),
                description=(description or "").strip() or None,
                participants=[actor_id, *members],
                created_by=actor_id,
                created_at=utc_now_iso(),
                participant_roles=roles,
            )

            await self.conversation_repo.save(conversation)
            for participant_id in conversation.participants:
                await self.conversation_repo.add_to_user_index(participant_id, conversation.id)

            self.logger.info(
                f"Created group {conversation.id} with {len(conversation.participants)} participants"
            )
            return conversation

        except Exception as error:
            self._handle_service_error(error, "create group chat")

    async def _get_for_participant(self, conversation_id: str, actor_id: str) -> Conversation:
        conversation = await self.conversation_repo.get(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        if not conversation.has_participant(actor_id):
            raise AuthorizationError("Not a participant in this conversation")
        return conversation

    async def _get_pending_request(
        self, conversation_id: str, actor_id: str, action: str
    ) -> Conversation:
        conversation = await self._get_for_participant(conversation_id, actor_id)
        if conversation.requested_by == actor_id:
            raise InvalidStateError(f"Cannot {action} your own request")
        if conversation.request_status != RequestStatus.PENDING.value:
            raise InvalidStateError(f"No pending message request to {action}")
        return conversation

    async def _summarize(self, conversation: Conversation, actor_id: str) -> Dict[str, Any]:
        item = conversation.model_dump(mode="json", exclude={"messages"})
        item["_activity"] = conversation.last_activity()

        if conversation.is_direct:
            other_id = conversation.other_participant(actor_id)
            if other_id:
                other = await self.user_repo.get_or_default(other_id)
                item["participant"] = {
                    "id": other.id,
                    "name": other.name,
                    "avatar_url": other.avatar_url,
                }
        else:
            item["participant_count"] = len(conversation.participants)
        return item
