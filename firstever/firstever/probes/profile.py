"""Probes answered by the user profile and its social listings."""

from __future__ import annotations

from firstever.models import AccountRecord, LoginRecord
from firstever.probes.base import BaseProbe, ProbeContext

_WEB_BASE = "https://github.com"


class AccountCreatedProbe(BaseProbe):
    field = "account_created"

    async def resolve(self, ctx: ProbeContext) -> AccountRecord | None:
        user = await ctx.client.get_user(ctx.username)
        return AccountRecord(login=user.login, created_at=user.created_at)


class FirstOrganizationProbe(BaseProbe):
    """Membership dates are not exposed; the listing's head is used instead."""

    field = "first_organization"

    async def resolve(self, ctx: ProbeContext) -> LoginRecord | None:
        orgs = await ctx.client.list_orgs(ctx.username, per_page=1)
        if not orgs:
            return None
        login = orgs[0].login
        return LoginRecord(login=login, html_url=f"{_WEB_BASE}/{login}")


class FirstFollowingProbe(BaseProbe):
    field = "first_following"

    async def resolve(self, ctx: ProbeContext) -> LoginRecord | None:
        users = await ctx.client.list_following(ctx.username, per_page=1)
        if not users:
            return None
        return LoginRecord(login=users[0].login, html_url=users[0].html_url)


class FirstFollowerProbe(BaseProbe):
    field = "first_follower"

    async def resolve(self, ctx: ProbeContext) -> LoginRecord | None:
        users = await ctx.client.list_followers(ctx.username, per_page=1)
        if not users:
            return None
        return LoginRecord(login=users[0].login, html_url=users[0].html_url)
