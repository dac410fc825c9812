"""
Client views and form handlers.

Views are pure functions of the shared `AppState` (plus local form state). They
return a `View` naming what to render and with which props, or a redirect. Form
handlers are the submit side: they call the matching action and return the
route to navigate to, or `None` to stay on the form (an alert explains why).
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from client.actions import DASHBOARD, Actions
from client.reducers import AppState

LOGIN = "/login"


@dataclass(frozen=True)
class View:
    name: str
    props: Dict[str, Any] = field(default_factory=dict)
    redirect: Optional[str] = None


def redirect(path: str) -> View:
    return View(name="redirect", redirect=path)


def alerts_view(state: AppState) -> View:
    return View(
        name="alerts",
        props={"alerts": [{"msg": a.msg, "type": a.alert_type} for a in state.alerts]},
    )


def navbar_view(state: AppState) -> View:
    auth = state.auth
    if auth.loading:
        links = []
    elif auth.is_authenticated:
        links = ["/profiles", "/posts", DASHBOARD, "logout"]
    else:
        links = ["/profiles", "/register", LOGIN]
    return View(name="navbar", props={"links": links})


def landing_view(state: AppState) -> View:
    if state.auth.is_authenticated:
        return redirect(DASHBOARD)
    return View(name="landing")


def login_view(state: AppState, form: Optional["LoginForm"] = None) -> View:
    if state.auth.is_authenticated:
        return redirect(DASHBOARD)
    return View(name="login", props={"form": form or LoginForm()})


def register_view(state: AppState, form: Optional["RegisterForm"] = None) -> View:
    if state.auth.is_authenticated:
        return redirect(DASHBOARD)
    return View(name="register", props={"form": form or RegisterForm()})


def private_view(state: AppState, view: View) -> View:
    """Guard a view that needs a logged-in user"""
    if not state.auth.is_authenticated and not state.auth.loading:
        return redirect(LOGIN)
    return view


def dashboard_view(state: AppState) -> View:
    profile = state.profile
    if profile.loading and profile.profile is None:
        return private_view(state, View(name="spinner"))

    user = state.auth.user or {}
    props: Dict[str, Any] = {"welcome": f"Welcome {user.get('name', '')}".strip()}
    if profile.profile is None:
        props["prompt"] = "You have not yet setup a profile, please add some info."
        props["actions"] = ["/create-profile"]
    else:
        props["experience"] = profile.profile.get("experience", [])
        props["education"] = profile.profile.get("education", [])
        props["actions"] = ["/edit-profile", "/add-experience", "/add-education"]
    return private_view(state, View(name="dashboard", props=props))


def profiles_view(state: AppState) -> View:
    if state.profile.loading:
        return View(name="spinner")
    return View(name="profiles", props={"profiles": list(state.profile.profiles)})


def posts_view(state: AppState) -> View:
    if state.post.loading:
        return private_view(state, View(name="spinner"))
    user_id = (state.auth.user or {}).get("id")
    posts = [
        {
            **post,
            "can_delete": post.get("user") == user_id,
            "like_count": len(post.get("likes", [])),
            "comment_count": len(post.get("comments", [])),
        }
        for post in state.post.posts
    ]
    return private_view(state, View(name="posts", props={"posts": posts}))


# Forms


@dataclass
class LoginForm:
    email: str = ""
    password: str = ""


@dataclass
class RegisterForm:
    name: str = ""
    email: str = ""
    password: str = ""
    password2: str = ""


@dataclass
class ExperienceForm:
    title: str = ""
    company: str = ""
    location: str = ""
    from_date: str = ""
    to_date: str = ""
    current: bool = False
    description: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return _entry_payload(self)


@dataclass
class EducationForm:
    school: str = ""
    degree: str = ""
    fieldofstudy: str = ""
    from_date: str = ""
    to_date: str = ""
    current: bool = False
    description: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return _entry_payload(self)


def _entry_payload(form) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for item in fields(form):
        value = getattr(form, item.name)
        key = {"from_date": "from", "to_date": "to"}.get(item.name, item.name)
        if value == "":
            continue
        payload[key] = value
    if form.current:
        payload.pop("to", None)
    return payload


async def submit_login(actions: Actions, form: LoginForm) -> Optional[str]:
    if await actions.login(form.email, form.password):
        return DASHBOARD
    return None


async def submit_register(actions: Actions, form: RegisterForm) -> Optional[str]:
    if form.password != form.password2:
        actions.set_alert("Passwords do not match", "danger")
        return None
    if await actions.register(form.name, form.email, form.password):
        return DASHBOARD
    return None


async def submit_profile(
    actions: Actions, form_fields: Dict[str, Any], edit: bool = False
) -> Optional[str]:
    return await actions.create_profile(form_fields, edit=edit)


async def submit_experience(actions: Actions, form: ExperienceForm) -> Optional[str]:
    return await actions.add_experience(form.to_payload())


async def submit_education(actions: Actions, form: EducationForm) -> Optional[str]:
    return await actions.add_education(form.to_payload())


async def submit_post(actions: Actions, text: str) -> bool:
    """Returns True when the form should be cleared"""
    return await actions.add_post(text)


async def submit_comment(actions: Actions, post_id: str, text: str) -> bool:
    return await actions.add_comment(post_id, text)
