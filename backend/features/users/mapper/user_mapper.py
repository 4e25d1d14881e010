"""
User Mapper.
"""
from typing import Dict, Any
from backend.features.users.domain.user_entity import User
from backend.features.users.dto.user_request import UpdateUserRequest, UserResponse

def to_user_response(user: User) -> Dict[str, Any]:
    return UserResponse(
        uuid=user.uuid,
        name=user.name,
        description=user.description,
        profileB64=user.profile_b64,
        chatPhrase=user.chat_phrase,
    ).model_dump()

def to_dict_from_entity(user: User) -> Dict[str, Any]:
    # Stored shape matches the JSON API (camelCase)
    return {
        'uuid': user.uuid,
        'name': user.name,
        'description': user.description,
        'profileB64': user.profile_b64,
        'chatPhrase': user.chat_phrase,
    }

def from_dict(data: Dict[str, Any]) -> User:
    return User(
        uuid=data.get('uuid', ''),
        name=data.get('name', ''),
        description=data.get('description', ''),
        profile_b64=data.get('profileB64'),
        chat_phrase=data.get('chatPhrase', ''),
    )

def from_update_request(request: UpdateUserRequest) -> User:
    return User(
        uuid=request.uuid,
        name=request.name,
        description=request.description,
        profile_b64=request.profileB64,
        chat_phrase=request.chatPhrase,
    )
