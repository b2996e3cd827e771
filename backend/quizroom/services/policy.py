from quizroom.errors import Forbidden
from quizroom.models import Room, RoomMember, User


def is_owner(room: Room, user: User) -> bool:
    return room.owner_id == user.id


def is_member(room: Room, user: User) -> bool:
    return RoomMember.query.filter_by(room_id=room.id, user_id=user.id).first() is not None


def require_owner(room: Room, user: User, action: str = 'manage this room') -> None:
    if not is_owner(room, user):
        raise Forbidden(f'Only the room owner may {action}')


def require_participant(room: Room, user: User) -> None:
    """Owner or a joined member."""
    if not (is_owner(room, user) or is_member(room, user)):
        raise Forbidden('You are not a member of this room')
