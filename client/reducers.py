"""
Client state slices and the reducers that update them.

Every slice is an immutable dataclass; reducers never modify the state they
receive and return a new object for any action they handle. Action type names
are module constants so action creators and reducers cannot drift apart.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from client.store import Action, combine_reducers

# Alerts
SET_ALERT = "SET_ALERT"
REMOVE_ALERT = "REMOVE_ALERT"

# Auth
REGISTER_SUCCESS = "REGISTER_SUCCESS"
REGISTER_FAIL = "REGISTER_FAIL"
USER_LOADED = "USER_LOADED"
AUTH_ERROR = "AUTH_ERROR"
LOGIN_SUCCESS = "LOGIN_SUCCESS"
LOGIN_FAIL = "LOGIN_FAIL"
LOGOUT = "LOGOUT"

# Profile
GET_PROFILE = "GET_PROFILE"
GET_PROFILES = "GET_PROFILES"
UPDATE_PROFILE = "UPDATE_PROFILE"
PROFILE_ERROR = "PROFILE_ERROR"
CLEAR_PROFILE = "CLEAR_PROFILE"

# Posts
GET_POSTS = "GET_POSTS"
GET_POST = "GET_POST"
ADD_POST = "ADD_POST"
DELETE_POST = "DELETE_POST"
POST_ERROR = "POST_ERROR"
UPDATE_LIKES = "UPDATE_LIKES"
ADD_COMMENT = "ADD_COMMENT"
REMOVE_COMMENT = "REMOVE_COMMENT"


@dataclass(frozen=True)
class Alert:
    id: str
    msg: str
    alert_type: str


@dataclass(frozen=True)
class AuthState:
    token: Optional[str] = None
    is_authenticated: bool = False
    loading: bool = True
    user: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ProfileState:
    profile: Optional[Dict[str, Any]] = None
    profiles: Tuple[Dict[str, Any], ...] = ()
    loading: bool = True
    error: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class PostState:
    posts: Tuple[Dict[str, Any], ...] = ()
    post: Optional[Dict[str, Any]] = None
    loading: bool = True
    error: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class AppState:
    auth: AuthState = field(default_factory=AuthState)
    profile: ProfileState = field(default_factory=ProfileState)
    post: PostState = field(default_factory=PostState)
    alerts: Tuple[Alert, ...] = ()


def alert_reducer(state: Optional[Tuple[Alert, ...]], action: Action) -> Tuple[Alert, ...]:
    state = state if state is not None else ()
    if action.type == SET_ALERT:
        return state + (action.payload,)
    if action.type == REMOVE_ALERT:
        return tuple(alert for alert in state if alert.id != action.payload)
    return state


def auth_reducer(state: Optional[AuthState], action: Action) -> AuthState:
    state = state or AuthState()

    if action.type == USER_LOADED:
        return replace(state, is_authenticated=True, loading=False, user=action.payload)
    if action.type in (REGISTER_SUCCESS, LOGIN_SUCCESS):
        return replace(state, token=action.payload["token"], is_authenticated=True, loading=False)
    if action.type in (REGISTER_FAIL, AUTH_ERROR, LOGIN_FAIL, LOGOUT):
        return AuthState(loading=False)
    return state


def profile_reducer(state: Optional[ProfileState], action: Action) -> ProfileState:
    state = state or ProfileState()

    if action.type in (GET_PROFILE, UPDATE_PROFILE):
        return replace(state, profile=action.payload, loading=False, error=None)
    if action.type == GET_PROFILES:
        return replace(state, profiles=tuple(action.payload), loading=False)
    if action.type == PROFILE_ERROR:
        return replace(state, profile=None, error=action.payload, loading=False)
    if action.type in (CLEAR_PROFILE, LOGOUT):
        return replace(state, profile=None, loading=False)
    return state


def post_reducer(state: Optional[PostState], action: Action) -> PostState:
    state = state or PostState()
    payload = action.payload

    if action.type == GET_POSTS:
        return replace(state, posts=tuple(payload), loading=False)
    if action.type == GET_POST:
        return replace(state, post=payload, loading=False)
    if action.type == ADD_POST:
        return replace(state, posts=(payload,) + state.posts, loading=False)
    if action.type == DELETE_POST:
        return replace(
            state,
            posts=tuple(post for post in state.posts if post["id"] != payload),
            loading=False,
        )
    if action.type == POST_ERROR:
        return replace(state, error=payload, loading=False)
    if action.type == UPDATE_LIKES:
        return replace(
            state,
            posts=_update_post(state.posts, payload["id"], likes=payload["likes"]),
            post=_update_one(state.post, payload["id"], likes=payload["likes"]),
            loading=False,
        )
    if action.type in (ADD_COMMENT, REMOVE_COMMENT):
        return replace(
            state,
            posts=_update_post(state.posts, payload["id"], comments=payload["comments"]),
            post=_update_one(state.post, payload["id"], comments=payload["comments"]),
            loading=False,
        )
    return state


def _update_one(post: Optional[Dict[str, Any]], post_id: str, **changes: Any):
    if post is None or post.get("id") != post_id:
        return post
    return {**post, **changes}


def _update_post(posts: Tuple[Dict[str, Any], ...], post_id: str, **changes: Any):
    return tuple(_update_one(post, post_id, **changes) for post in posts)


root_reducer = combine_reducers(
    AppState,
    auth=auth_reducer,
    profile=profile_reducer,
    post=post_reducer,
    alerts=alert_reducer,
)


def alert_messages(state: AppState) -> List[str]:
    return [alert.msg for alert in state.alerts]
