"""
Core Models for Flow Django Backend

These are UNMANAGED models that map to existing Supabase PostgreSQL tables.
They do NOT create migrations - Django reads from existing tables.
"""
import uuid

from django.db import models

from .constants import (
    DEFAULT_ADVANCE_RATE,
    DEFAULT_CARRIER_SORT_ORDER,
    DEFAULT_COMP,
    DEFAULT_THEME,
)
from .utils import format_full_name


class Profile(models.Model):
    """
    Represents an agent in the directory.
    Maps to: public.profiles

    The id is the Supabase auth user id, so the JWT `sub` claim resolves
    directly to a profile row.
    """
    ROLE_CHOICES = [
        ('agent', 'Agent'),
        ('admin', 'Admin'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    email = models.CharField(max_length=255, null=True, blank=True)
    first_name = models.CharField(max_length=255, null=True, blank=True)
    last_name = models.CharField(max_length=255, null=True, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='agent')
    is_agency_owner = models.BooleanField(default=False)
    upline = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='downlines'
    )
    comp = models.IntegerField(default=DEFAULT_COMP)
    theme = models.CharField(max_length=20, default=DEFAULT_THEME)
    avatar_url = models.TextField(null=True, blank=True)
    must_set_password = models.BooleanField(default=False)
    discord_webhook_url = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'profiles'

    def __str__(self):
        return f"{self.full_name} ({self.email})"

    @property
    def full_name(self) -> str:
        return format_full_name(self.first_name, self.last_name) or (self.email or '')

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'


class Deal(models.Model):
    """
    A submitted policy.
    Maps to: public.deals

    product_name, effective_date, source and referrals used to live inside
    `note`; rows written before the typed columns existed still carry them
    there (see apps.deals.notes).
    """
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('active', 'Active'),
        ('declined', 'Declined'),
        ('cancelled', 'Cancelled'),
        ('lapsed', 'Lapsed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    agent = models.ForeignKey(
        Profile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='deals'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, null=True, blank=True)
    client_dob = models.DateField(null=True, blank=True)
    beneficiary_name = models.CharField(max_length=255, null=True, blank=True)
    beneficiary_relationship = models.CharField(max_length=20, null=True, blank=True)
    beneficiary_dob = models.DateField(null=True, blank=True)
    company = models.CharField(max_length=255, null=True, blank=True)
    premium = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    coverage = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    policy_number = models.CharField(max_length=255, null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    note = models.TextField(null=True, blank=True)

    # Structured note attributes
    product_name = models.CharField(max_length=255, null=True, blank=True)
    effective_date = models.DateField(null=True, blank=True)
    source = models.CharField(max_length=50, null=True, blank=True)
    referrals = models.IntegerField(null=True, blank=True)

    class Meta:
        managed = False
        db_table = 'deals'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.policy_number or 'No policy#'} - {self.full_name}"


class FollowUp(models.Model):
    """
    A scheduled call-back with a prospect.
    Maps to: public.follow_ups
    """
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('done', 'Done'),
        ('converted', 'Converted'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    agent = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='follow_ups'
    )
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, null=True, blank=True)
    client_dob = models.DateField(null=True, blank=True)
    beneficiary_name = models.CharField(max_length=255, null=True, blank=True)
    beneficiary_dob = models.DateField(null=True, blank=True)
    coverage = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    premium = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    company = models.CharField(max_length=255, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    follow_up_at = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    outcome = models.CharField(max_length=20, null=True, blank=True)  # completed | denied
    closed_at = models.DateTimeField(null=True, blank=True)
    deal = models.ForeignKey(
        Deal,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='follow_ups'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'follow_ups'
        ordering = ['follow_up_at']

    def __str__(self):
        return f"{self.full_name} @ {self.follow_up_at:%Y-%m-%d %H:%M}"


class DebtCase(models.Model):
    """
    A debt-management client file.
    Maps to: public.debt_cases
    """
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('in_progress', 'In Progress'),
        ('settled', 'Settled'),
        ('charged_off', 'Charged Off'),
        ('disputed', 'Disputed'),
        ('lost', 'Lost'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    agent = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='debt_cases'
    )
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, null=True, blank=True)
    creditor = models.CharField(max_length=255)
    account_last4 = models.CharField(max_length=4, null=True, blank=True)
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    monthly_payment = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    interest_rate = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    source = models.CharField(max_length=50, null=True, blank=True)
    note = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        managed = False
        db_table = 'debt_cases'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} - {self.creditor}"


class Carrier(models.Model):
    """
    Represents an insurance carrier the agency writes with.
    Maps to: public.carriers
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    supported_name = models.CharField(max_length=255, null=True, blank=True)
    advance_rate = models.DecimalField(max_digits=5, decimal_places=4, default=DEFAULT_ADVANCE_RATE)
    active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=DEFAULT_CARRIER_SORT_ORDER)
    eapp_url = models.TextField(null=True, blank=True)
    portal_url = models.TextField(null=True, blank=True)
    support_phone = models.CharField(max_length=50, null=True, blank=True)
    logo_url = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'carriers'
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name


class CarrierProduct(models.Model):
    """
    A product sold under a carrier.
    Maps to: public.carrier_products
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    carrier = models.ForeignKey(
        Carrier,
        on_delete=models.CASCADE,
        related_name='products'
    )
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'carrier_products'
        ordering = ['name']

    def __str__(self):
        return f"{self.carrier.name} - {self.name}"


class CarrierProductComp(models.Model):
    """
    Commission rate paid on a product at a given comp level.
    Maps to: public.carrier_product_comp
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    product = models.ForeignKey(
        CarrierProduct,
        on_delete=models.CASCADE,
        related_name='comp_rates'
    )
    comp_level = models.IntegerField()
    rate = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)

    class Meta:
        managed = False
        db_table = 'carrier_product_comp'
        unique_together = [('product', 'comp_level')]
        ordering = ['-comp_level']

    def __str__(self):
        return f"{self.product_id} @ {self.comp_level}: {self.rate}"


class LeaderboardPost(models.Model):
    """
    Marks a scheduled report as delivered for a (local date, slot) pair.
    Maps to: public.leaderboard_posts
    """
    id = models.BigAutoField(primary_key=True)
    local_date = models.DateField()
    slot = models.CharField(max_length=50)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'leaderboard_posts'
        unique_together = [('local_date', 'slot')]

    def __str__(self):
        return f"{self.local_date} {self.slot}"
