"""
Core Constants

Centralized configuration values for the application.
"""

# Annual premium is monthly premium times this
AP_MULTIPLIER = 12

# Agents under this AP in a window are flagged on the analytics page
WEEKLY_UNDER_AP = 5000

# Downline traversal stops after this many nodes
MAX_DOWNLINE_NODES = 2500

# Scheduled report limits
REPORT_TOP_N = 50
MAX_REPORT_PROFILES = 50000

# Deal house returns at most this many rows
MAX_DEAL_HOUSE_ROWS = 2000

# Daily series bucket bounds
DAILY_SERIES_MIN_DAYS = 1
DAILY_SERIES_MAX_DAYS = 62

# Range presets accepted by the analytics endpoints
RANGE_PRESETS = ['this_week', 'last_7', 'this_month', 'custom']

# Sentinels used when a deal has no agent or carrier
UNKNOWN_AGENT_KEY = 'unknown'
UNKNOWN_AGENT_NAME = '—'
FALLBACK_AGENT_NAME = 'Agent'
OTHER_CARRIER = 'Other'

# Profiles
ROLES = ['agent', 'admin']
COMP_MIN = 0
COMP_MAX = 200
COMP_STEP = 5
DEFAULT_COMP = 70

# Deals
DEAL_STATUSES = ['pending', 'active', 'declined', 'cancelled', 'lapsed']

DEAL_STATUS_TRANSITIONS = {
    'pending': ['active', 'declined', 'cancelled'],
    'active': ['lapsed', 'cancelled'],
    'lapsed': ['active', 'cancelled'],
    'declined': [],
    'cancelled': [],
}

BENEFICIARY_RELATIONSHIPS = ['spouse', 'child', 'parent', 'friend', 'sibling', 'other']

DEAL_SOURCES = ['Inbound', 'Readymode', 'Referral', 'Warm-Market']

# Follow-ups
FOLLOW_UP_STATUSES = ['open', 'done', 'converted']

FOLLOW_UP_TRANSITIONS = {
    'open': ['done', 'converted'],
    'done': [],
    'converted': [],
}

FOLLOW_UP_FILTERS = ['due_now', 'today', 'next_7_days', 'all', 'completed']

FOLLOW_UP_PRESETS = ['24hrs', '48hrs', 'next_week', 'custom']

DEFAULT_FOLLOW_UP_TIME = '09:00'

# Debt cases
DEBT_CASE_STATUSES = ['open', 'in_progress', 'settled', 'charged_off', 'disputed', 'lost']

DEBT_CASE_SOURCES = ['Inbound', 'Readymode', 'Referral', 'Warm-Market']

# Carriers
DEFAULT_ADVANCE_RATE = 0.75
DEFAULT_CARRIER_SORT_ORDER = 999

SUPPORTED_CARRIERS = [
    'Aetna',
    'Aflac',
    'Royal Neighbors of America',
    'SBLI',
    'Transamerica',
]

# Comp schedules: most products use A, preferred/standard tiers use B
COMP_LEVELS_A = [115, 105, 100, 95, 90, 85, 80, 75, 70, 65, 60]
COMP_LEVELS_B = [125, 115, 110, 105, 100, 95, 90, 85, 80, 75, 70]

COMP_SCHEDULE_B_KEYWORDS = ['preferred', 'standard']

# Themes
DEFAULT_THEME = 'blue'

THEME_VARS = {
    'blue': {
        'accent': '#3b82f6',
        'accent2': '#60a5fa',
        'textOnAccent': '#ffffff',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(59,130,246,0.35)',
    },
    'gold': {
        'accent': '#f59e0b',
        'accent2': '#fbbf24',
        'textOnAccent': '#0b0f1a',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(245,158,11,0.35)',
    },
    'green': {
        'accent': '#22c55e',
        'accent2': '#4ade80',
        'textOnAccent': '#06110b',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(34,197,94,0.35)',
    },
    'red': {
        'accent': '#ef4444',
        'accent2': '#fb7185',
        'textOnAccent': '#0b0f1a',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(239,68,68,0.35)',
    },
    'mono': {
        'accent': '#e5e7eb',
        'accent2': '#9ca3af',
        'textOnAccent': '#0b0f1a',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(229,231,235,0.25)',
    },
    'fuchsia': {
        'accent': '#d946ef',
        'accent2': '#f472b6',
        'textOnAccent': '#0b0f1a',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(217,70,239,0.35)',
    },
    'bw': {
        'accent': '#ffffff',
        'accent2': '#a3a3a3',
        'textOnAccent': '#000000',
        'card': 'rgba(255,255,255,0.08)',
        'cardBorder': 'rgba(255,255,255,0.16)',
        'glow': 'rgba(255,255,255,0.25)',
    },
    'orange': {
        'accent': '#f97316',
        'accent2': '#fdba74',
        'textOnAccent': '#0b0f1a',
        'card': 'rgba(255,255,255,0.05)',
        'cardBorder': 'rgba(255,255,255,0.10)',
        'glow': 'rgba(249,115,22,0.35)',
    },
}

THEMES = list(THEME_VARS)

# Avatar uploads
AVATAR_EXTENSIONS = ['png', 'jpg', 'jpeg', 'webp', 'gif']
MAX_AVATAR_BYTES = 5 * 1024 * 1024
