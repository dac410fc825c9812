"""
Client action creators.

`Actions` binds the API client, the store and the token storage together. Each
method performs one API call and dispatches the outcome. Failures never
propagate to the caller: they are dispatched as error actions and surfaced as
`danger` alerts, one per server message. Methods behind a form return the
route to navigate to on success (or `None` when the user should stay put).
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from client.api import ClientError, ConnectorClient
from client.reducers import (
    ADD_COMMENT,
    ADD_POST,
    AUTH_ERROR,
    CLEAR_PROFILE,
    DELETE_POST,
    GET_POST,
    GET_POSTS,
    GET_PROFILE,
    GET_PROFILES,
    LOGIN_FAIL,
    LOGIN_SUCCESS,
    LOGOUT,
    POST_ERROR,
    PROFILE_ERROR,
    REGISTER_FAIL,
    REGISTER_SUCCESS,
    REMOVE_ALERT,
    REMOVE_COMMENT,
    SET_ALERT,
    UPDATE_LIKES,
    UPDATE_PROFILE,
    USER_LOADED,
    Alert,
)
from client.storage import MemoryTokenStorage
from client.store import Action, Store

logger = logging.getLogger(__name__)

DASHBOARD = "/dashboard"
DEFAULT_ALERT_TIMEOUT = 5.0


def _error_payload(error: ClientError) -> Dict[str, Any]:
    return {"msg": "; ".join(error.messages), "status": error.status_code}


class Actions:
    """API calls that update the shared client state"""

    def __init__(
        self,
        store: Store,
        api: ConnectorClient,
        storage=None,
        alert_timeout: Optional[float] = DEFAULT_ALERT_TIMEOUT,
    ):
        self.store = store
        self.api = api
        self.storage = storage or MemoryTokenStorage()
        self.alert_timeout = alert_timeout

    # Alerts

    def set_alert(self, msg: str, alert_type: str = "danger", timeout: Optional[float] = None) -> str:
        """Show a transient alert; it is dismissed after the timeout"""
        alert_id = uuid.uuid4().hex
        self.store.dispatch(Action(SET_ALERT, Alert(id=alert_id, msg=msg, alert_type=alert_type)))

        timeout = self.alert_timeout if timeout is None else timeout
        if timeout:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop; alert stays until removed")
            else:
                loop.call_later(timeout, self.remove_alert, alert_id)
        return alert_id

    def remove_alert(self, alert_id: str):
        self.store.dispatch(Action(REMOVE_ALERT, alert_id))

    def _alert_errors(self, error: ClientError):
        for message in error.messages:
            self.set_alert(message, "danger")

    # Auth

    def _use_token(self, token: Optional[str]):
        self.api.set_auth_token(token)
        if token:
            self.storage.save(token)
        else:
            self.storage.clear()

    async def load_user(self) -> bool:
        """Fetch the current user for the stored token"""
        token = self.api.auth_token or self.storage.load()
        if token:
            self.api.set_auth_token(token)

        try:
            user = await self.api.get_current_user()
        except ClientError as e:
            logger.info(f"Could not load current user: {e}")
            self._use_token(None)
            self.store.dispatch(Action(AUTH_ERROR))
            return False

        self.store.dispatch(Action(USER_LOADED, user))
        return True

    async def register(self, name: str, email: str, password: str) -> bool:
        try:
            token = await self.api.register(name, email, password)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(REGISTER_FAIL))
            return False

        self._use_token(token)
        self.store.dispatch(Action(REGISTER_SUCCESS, {"token": token}))
        return await self.load_user()

    async def login(self, email: str, password: str) -> bool:
        try:
            token = await self.api.login(email, password)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(LOGIN_FAIL))
            return False

        self._use_token(token)
        self.store.dispatch(Action(LOGIN_SUCCESS, {"token": token}))
        return await self.load_user()

    def logout(self):
        self._use_token(None)
        self.store.dispatch(Action(CLEAR_PROFILE))
        self.store.dispatch(Action(LOGOUT))

    # Profiles

    async def get_current_profile(self):
        try:
            profile = await self.api.get_my_profile()
        except ClientError as e:
            # A 404 here only means no profile has been created yet
            self.store.dispatch(Action(PROFILE_ERROR, _error_payload(e)))
            return
        self.store.dispatch(Action(GET_PROFILE, profile))

    async def get_profiles(self):
        self.store.dispatch(Action(CLEAR_PROFILE))
        try:
            profiles = await self.api.get_profiles()
        except ClientError as e:
            self.store.dispatch(Action(PROFILE_ERROR, _error_payload(e)))
            return
        self.store.dispatch(Action(GET_PROFILES, profiles))

    async def get_profile_by_id(self, user_id: str):
        try:
            profile = await self.api.get_profile_by_user(user_id)
        except ClientError as e:
            self.store.dispatch(Action(PROFILE_ERROR, _error_payload(e)))
            return
        self.store.dispatch(Action(GET_PROFILE, profile))

    async def create_profile(self, fields: Dict[str, Any], edit: bool = False) -> Optional[str]:
        """Create or update the profile; returns the route to go to"""
        try:
            profile = await self.api.save_profile(fields)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(PROFILE_ERROR, _error_payload(e)))
            return None

        self.store.dispatch(Action(GET_PROFILE, profile))
        self.set_alert("Profile Updated" if edit else "Profile Created", "success")
        return None if edit else DASHBOARD

    async def add_experience(self, entry: Dict[str, Any]) -> Optional[str]:
        return await self._update_profile(self.api.add_experience(entry), "Experience Added")

    async def add_education(self, entry: Dict[str, Any]) -> Optional[str]:
        return await self._update_profile(self.api.add_education(entry), "Education Added")

    async def delete_experience(self, exp_id: str):
        await self._update_profile(self.api.delete_experience(exp_id), "Experience Removed")

    async def delete_education(self, edu_id: str):
        await self._update_profile(self.api.delete_education(edu_id), "Education Removed")

    async def delete_profile(self) -> bool:
        try:
            await self.api.delete_profile()
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(PROFILE_ERROR, _error_payload(e)))
            return False

        self.store.dispatch(Action(CLEAR_PROFILE))
        self.set_alert("Your profile has been deleted", "success")
        return True

    async def _update_profile(self, call, success_message: str) -> Optional[str]:
        try:
            profile = await call
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(PROFILE_ERROR, _error_payload(e)))
            return None

        self.store.dispatch(Action(UPDATE_PROFILE, profile))
        self.set_alert(success_message, "success")
        return DASHBOARD

    # Posts

    async def get_posts(self):
        try:
            posts = await self.api.get_posts()
        except ClientError as e:
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return
        self.store.dispatch(Action(GET_POSTS, posts))

    async def get_post(self, post_id: str):
        try:
            post = await self.api.get_post(post_id)
        except ClientError as e:
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return
        self.store.dispatch(Action(GET_POST, post))

    async def add_post(self, text: str) -> bool:
        try:
            post = await self.api.add_post(text)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return False

        self.store.dispatch(Action(ADD_POST, post))
        self.set_alert("Post Created", "success")
        return True

    async def delete_post(self, post_id: str) -> bool:
        try:
            await self.api.delete_post(post_id)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return False

        self.store.dispatch(Action(DELETE_POST, post_id))
        self.set_alert("Post Removed", "success")
        return True

    async def add_like(self, post_id: str):
        await self._update_likes(post_id, self.api.like(post_id))

    async def remove_like(self, post_id: str):
        await self._update_likes(post_id, self.api.unlike(post_id))

    async def _update_likes(self, post_id: str, call):
        try:
            likes = await call
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return
        self.store.dispatch(Action(UPDATE_LIKES, {"id": post_id, "likes": likes}))

    async def add_comment(self, post_id: str, text: str) -> bool:
        try:
            comments = await self.api.add_comment(post_id, text)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return False

        self.store.dispatch(Action(ADD_COMMENT, {"id": post_id, "comments": comments}))
        self.set_alert("Comment Added", "success")
        return True

    async def delete_comment(self, post_id: str, comment_id: str) -> bool:
        try:
            comments = await self.api.delete_comment(post_id, comment_id)
        except ClientError as e:
            self._alert_errors(e)
            self.store.dispatch(Action(POST_ERROR, _error_payload(e)))
            return False

        self.store.dispatch(Action(REMOVE_COMMENT, {"id": post_id, "comments": comments}))
        self.set_alert("Comment Removed", "success")
        return True
