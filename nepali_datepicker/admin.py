from django.contrib import admin

from .models import BSMonthLayout


@admin.register(BSMonthLayout)
class BSMonthLayoutAdmin(admin.ModelAdmin):
    list_display = ['bs_year', 'month_display', 'days_in_month', 'weekday_display', 'ad_start_date', 'probed_at']
    list_filter = ['bs_year', 'month']
    search_fields = ['bs_year']
    ordering = ['-bs_year', 'month']
    readonly_fields = ['probed_at']
    list_per_page = 50

    def month_display(self, obj):
        return obj.get_month_display()
    month_display.short_description = 'Month'
    month_display.admin_order_field = 'month'

    def weekday_display(self, obj):
        return obj.get_first_weekday_display()
    weekday_display.short_description = 'Starts on'

    fieldsets = (
        ('Nepali Date', {
            'fields': ('bs_year', 'month', 'days_in_month', 'first_weekday')
        }),
        ('Gregorian Reference', {
            'fields': ('ad_start_date', 'probed_at')
        }),
    )
