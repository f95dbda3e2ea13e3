"""Command line entry point for the learning-platform client.

Why:
    Drive the session, enrollment and authoring flows from a terminal. The
    bearer token and the learner id live in a small state file between runs;
    every command resumes the session from that token.

Usage:
    lms login -u alice
    lms courses --search python
    lms enroll 5
    lms course 5
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar
import asyncio

import click
import httpx
from dotenv import load_dotenv

from .api_client import ApiClient
from .config import ClientConfig, configure_logging, load_client_config
from .errors import AuthError, LmsClientError
from .identity_access.domain import Role
from .identity_access.registration import AuthorProfileInput, signup as signup_user
from .identity_access.session import Session, SessionManager
from .identity_access.stores import FileSessionStore, SessionStore
from .learning.enrollment import EnrollmentStore
from .learning.identity import IdentityResolver
from .teaching.courses import CourseService


T = TypeVar("T")


@dataclass
class CliContext:
    config: ClientConfig
    store: SessionStore
    transport: Optional[httpx.AsyncBaseTransport] = None


def _run(ctx: CliContext, action: Callable[[ApiClient, SessionManager], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with ApiClient.from_config(ctx.config, transport=ctx.transport) as api:
            return await action(api, SessionManager(api, ctx.store))

    try:
        return asyncio.run(runner())
    except LmsClientError as exc:
        raise click.ClickException(exc.message) from exc


async def _resume(sessions: SessionManager) -> Session:
    session = await sessions.resume()
    if session is None:
        raise AuthError("not_authenticated", "Not logged in. Run `lms login` first.")
    return session


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.pass_context
def main(ctx: click.Context) -> None:
    """Learning platform client."""
    if isinstance(ctx.obj, CliContext):
        return
    load_dotenv()
    try:
        cfg = load_client_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(cfg.log_level)
    ctx.obj = CliContext(config=cfg, store=FileSessionStore(cfg.state_file))


# ------------------------------- Identity -----------------------------------


@main.command()
@click.option("-u", "--username", prompt=True, help="Account username.")
@click.option("-p", "--password", prompt=True, hide_input=True, help="Account password.")
@click.pass_obj
def login(ctx: CliContext, username: str, password: str) -> None:
    """Log in and remember the session."""

    async def action(api: ApiClient, sessions: SessionManager) -> Session:
        return await sessions.login(username, password)

    session = _run(ctx, action)
    click.echo("Login Successful")
    click.echo(f"Role: {session.role.value} -> {session.home_path}")


@main.command()
@click.pass_obj
def logout(ctx: CliContext) -> None:
    """Forget the stored session."""

    async def action(api: ApiClient, sessions: SessionManager) -> None:
        sessions.logout()

    _run(ctx, action)
    click.echo("Logged out")


@main.command()
@click.pass_obj
def whoami(ctx: CliContext) -> None:
    """Show the current user, role and landing path."""

    async def action(api: ApiClient, sessions: SessionManager) -> Session:
        return await _resume(sessions)

    session = _run(ctx, action)
    click.echo(f"{session.username or '?'} ({session.role.value}) -> {session.home_path}")


@main.command()
@click.option("-u", "--username", prompt=True)
@click.option("-p", "--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--role", type=click.Choice([r.value for r in Role]), default=Role.LEARNER.value, show_default=True)
@click.option("--full-name", help="Author full name (required for AUTHOR).")
@click.option("--contact")
@click.option("--website")
@click.pass_obj
def signup(
    ctx: CliContext,
    username: str,
    password: str,
    role: str,
    full_name: Optional[str],
    contact: Optional[str],
    website: Optional[str],
) -> None:
    """Create an account (and an author profile for authors)."""
    profile = AuthorProfileInput(full_name=full_name or "", contact=contact, website=website)

    async def action(api: ApiClient, sessions: SessionManager):
        return await signup_user(
            api,
            username=username,
            password=password,
            role=role,
            author_profile=profile if role == Role.AUTHOR.value else None,
        )

    _run(ctx, action)
    click.echo("Registration successful! You can now log in.")


# ------------------------------- Learning -----------------------------------


@main.command()
@click.option("-s", "--search", default="", help="Filter courses by title.")
@click.pass_obj
def courses(ctx: CliContext, search: str) -> None:
    """List all courses and mark the ones you are enrolled in."""

    async def action(api: ApiClient, sessions: SessionManager) -> EnrollmentStore:
        await _resume(sessions)
        store = EnrollmentStore(sessions, IdentityResolver(ctx.store))
        await store.load()
        return store

    store = _run(ctx, action)
    found = store.search(search)
    if not found:
        click.echo("No courses found.")
        return
    for course in found:
        mark = "x" if store.is_enrolled(course.id) else " "
        click.echo(f"[{mark}] {course.id}  {course.title} ({course.credits:g} credits)")


@main.command()
@click.argument("course_id")
@click.pass_obj
def enroll(ctx: CliContext, course_id: str) -> None:
    """Enroll in COURSE_ID."""

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        store = EnrollmentStore(sessions, IdentityResolver(ctx.store))
        await store.load()
        return await store.enroll(course_id)

    enrollment = _run(ctx, action)
    title = enrollment.title if enrollment and enrollment.title else course_id
    click.echo(f"Enrolled in {title}")


# ------------------------------- Teaching -----------------------------------


@main.command()
@click.argument("course_id")
@click.pass_obj
def course(ctx: CliContext, course_id: str) -> None:
    """Show modules, videos and reviews of COURSE_ID."""

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        return await CourseService(sessions).course_content(course_id)

    content = _run(ctx, action)
    tree = content.tree
    if tree.course is not None:
        click.echo(f"{tree.course.title} (ID: {course_id}) - {tree.course.credits:g} Credits")
        if tree.course.author is not None and tree.course.author.name:
            click.echo(f"Author: {tree.course.author.name}")
    if not tree.modules:
        click.echo("No modules yet.")
    for module in tree.modules:
        click.echo(f"- {module.title}")
        for video in tree.videos_for(module.id):
            click.echo(f"    * {video.title} ({video.play_time_minutes:g} min)")
    click.echo(f"Reviews: {len(content.reviews)}")


@main.command("my-courses")
@click.pass_obj
def my_courses(ctx: CliContext) -> None:
    """List the courses you authored."""

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        return await CourseService(sessions).list_author_courses()

    items = _run(ctx, action)
    if not items:
        click.echo("Add your first course.")
        return
    for item in items:
        click.echo(f"{item.id}  {item.title} ({item.credits:g} credits)")


@main.command("add-course")
@click.option("--title", required=True)
@click.option("--credits", required=True)
@click.option("--image", default=None)
@click.pass_obj
def add_course(ctx: CliContext, title: str, credits: str, image: Optional[str]) -> None:
    """Create a course as the logged-in author."""

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        return await CourseService(sessions).add_course(title=title, credits=credits, image=image)

    _run(ctx, action)
    click.echo("Course added successfully!")


@main.command()
@click.pass_obj
def stats(ctx: CliContext) -> None:
    """Show enrollments per course."""

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        return await CourseService(sessions).enrollment_stats()

    for stat in _run(ctx, action):
        click.echo(f"{stat.course_title}: {stat.enrollments}")


@main.command()
@click.pass_obj
def profile(ctx: CliContext) -> None:
    """Show the author profile."""

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        return await CourseService(sessions).author_profile()

    author = _run(ctx, action)
    click.echo(f"Name: {author.name or '-'}")
    click.echo(f"Contact: {author.contact or '-'}")
    click.echo(f"Website: {author.website or '-'}")


@main.command("upload-pic")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def upload_pic(ctx: CliContext, path: Path) -> None:
    """Upload PATH as the author profile picture."""
    content = path.read_bytes()

    async def action(api: ApiClient, sessions: SessionManager):
        await _resume(sessions)
        return await CourseService(sessions).upload_profile_picture(filename=path.name, content=content)

    file_name = _run(ctx, action)
    click.echo(f"Profile picture updated: {file_name}")


if __name__ == "__main__":  # pragma: no cover
    main()
