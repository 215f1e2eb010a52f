from django import forms
from django.contrib import admin

from ticketing.models import (
    Booking,
    Event,
    EventAnalytics,
    HostAnalytics,
    TicketBreakdownEntry,
    TicketType,
)


class TicketTypeForm(forms.ModelForm):
    """Inventory is entered once, when the ticket type is created."""

    class Meta:
        model = TicketType
        fields = "__all__"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.instance._state.adding and "available_quantity" in self.fields:
            self.fields["available_quantity"].disabled = True


class TicketTypeInline(admin.TabularInline):
    model = TicketType
    form = TicketTypeForm
    extra = 1
    readonly_fields = ["sold_count"]


class TicketBreakdownInline(admin.TabularInline):
    model = TicketBreakdownEntry
    extra = 0
    readonly_fields = ["ticket_type_name", "sold_count", "revenue"]
    can_delete = False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "date", "host_uid", "tickets_sold", "created_at"]
    search_fields = ["title", "name", "host_uid", "host_id"]
    readonly_fields = ["tickets_sold", "total_tickets_sold"]
    inlines = [TicketTypeInline]


@admin.register(TicketType)
class TicketTypeAdmin(admin.ModelAdmin):
    list_display = ["name", "event", "show_id", "price", "available_quantity", "sold_count"]
    list_filter = ["event"]
    form = TicketTypeForm
    readonly_fields = ["sold_count"]

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return [*self.readonly_fields, "available_quantity"]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "ticket_type_name", "quantity", "status", "created_at"]
    list_filter = ["status", "event"]
    search_fields = ["id", "user_email", "user_name"]
    readonly_fields = [
        "event",
        "venue_id",
        "show_id",
        "ticket_type_id",
        "ticket_type_name",
        "quantity",
        "price_per_ticket",
        "total_price",
        "user_id",
        "host_id",
        "analytics_counted_at",
    ]


@admin.register(EventAnalytics)
class EventAnalyticsAdmin(admin.ModelAdmin):
    list_display = ["event_name", "event_date", "host_id", "total_tickets_sold", "total_revenue"]
    search_fields = ["event_name", "host_id"]
    readonly_fields = ["host_id", "total_tickets_sold", "total_revenue"]
    inlines = [TicketBreakdownInline]


@admin.register(HostAnalytics)
class HostAnalyticsAdmin(admin.ModelAdmin):
    list_display = ["host_id", "total_tickets_sold", "total_revenue", "updated_at"]
    readonly_fields = ["host_id", "total_tickets_sold", "total_revenue"]
