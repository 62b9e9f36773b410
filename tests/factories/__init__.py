"""
Factory Boy Factories for Flow Models

Import all factories here for easy access in tests.
"""
from tests.factories.core import (
    CarrierFactory,
    CarrierProductCompFactory,
    CarrierProductFactory,
    ProfileFactory,
)
from tests.factories.deals import (
    DealFactory,
    DebtCaseFactory,
    FollowUpFactory,
)

__all__ = [
    # Core
    'ProfileFactory',
    'CarrierFactory',
    'CarrierProductFactory',
    'CarrierProductCompFactory',
    # Records
    'DealFactory',
    'FollowUpFactory',
    'DebtCaseFactory',
]
