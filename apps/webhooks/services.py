"""
Webhook Services - deal-posted Discord notifications

The Discord URL lives on profiles and is never sent to clients; it is
resolved server-side by walking up the poster's upline chain.
"""
import logging
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.exceptions import NotFoundError, PermissionDeniedError
from apps.core.hierarchy import get_upline_chain
from apps.core.integrations import post_discord_webhook
from apps.core.models import Deal, Profile
from apps.core.utils import format_money_cents, parse_premium

logger = logging.getLogger(__name__)

EMPTY_FIELD = '—'


def resolve_webhook_url(start_id: UUID) -> str | None:
    """First discord_webhook_url found from start_id upward, or None."""
    nodes = list(Profile.objects.values('id', 'upline_id', 'discord_webhook_url'))
    urls = {node['id']: node['discord_webhook_url'] for node in nodes}

    for profile_id in get_upline_chain(start_id, nodes):
        url = (urls.get(profile_id) or '').strip()
        if url.startswith('http'):
            return url
    return None


def build_deal_embed(deal: Deal) -> dict:
    premium = parse_premium(deal.premium)
    coverage = parse_premium(deal.coverage)
    return {
        'content': None,
        'embeds': [
            {
                'title': 'New Deal Posted ✅',
                'description': f'**{deal.full_name or EMPTY_FIELD}** • {deal.company or EMPTY_FIELD}',
                'fields': [
                    {'name': 'Premium', 'value': f'${format_money_cents(premium)}', 'inline': True},
                    {'name': 'Coverage', 'value': f'${format_money_cents(coverage)}' if coverage else EMPTY_FIELD, 'inline': True},
                    {'name': 'Policy #', 'value': deal.policy_number or EMPTY_FIELD, 'inline': True},
                    {'name': 'Phone', 'value': deal.phone or EMPTY_FIELD, 'inline': True},
                ],
                'timestamp': deal.created_at.isoformat() if deal.created_at else None,
            }
        ],
    }


def notify_deal_posted(user: AuthenticatedUser, deal_id: str) -> dict:
    """
    Post the deal embed to the poster's (or nearest upline's) channel.

    Only the agent who owns the deal may trigger it.
    """
    try:
        deal_uuid = UUID(str(deal_id))
    except ValueError as err:
        raise NotFoundError('Deal not found') from err

    deal = Deal.objects.filter(id=deal_uuid).first()
    if not deal:
        raise NotFoundError('Deal not found')
    if deal.agent_id != user.id:
        raise PermissionDeniedError('Forbidden')

    webhook_url = resolve_webhook_url(user.id)
    if not webhook_url:
        logger.info(f'No Discord webhook in upline chain of {user.id}; skipping deal {deal.id}')
        return {'ok': True, 'skipped': True}

    post_discord_webhook(webhook_url, build_deal_embed(deal))
    logger.info(f'Deal {deal.id} posted to Discord for {user.id}')
    return {'ok': True}
