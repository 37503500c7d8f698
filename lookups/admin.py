# lookups/admin.py
from django.contrib import admin

from .models import LookupCategory, LookupValue


class LookupValueInline(admin.TabularInline):
    model = LookupValue
    extra = 0
    fields = ('code', 'name', 'color_code', 'sort_order', 'is_active')


@admin.register(LookupCategory)
class LookupCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'is_active', 'updated_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'code')
    inlines = [LookupValueInline]


@admin.register(LookupValue)
class LookupValueAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'category', 'sort_order', 'is_active')
    list_filter = ('category', 'is_active')
    search_fields = ('name', 'code', 'category__code')
