# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Profile, User


class ProfileInline(admin.TabularInline):
    model = Profile
    extra = 0
    fields = ('village', 'role', 'extra_permissions', 'is_active')
    raw_id_fields = ('village',)


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    """Custom admin for the email-login User model."""
    list_display = ('email', 'first_name', 'last_name', 'current_village', 'is_staff', 'is_active')
    list_filter = ('is_staff', 'is_active', 'is_superuser', 'current_village')
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Personal info'), {'fields': ('first_name', 'last_name', 'phone_number')}),
        (_('Village Context'), {'fields': ('current_village',)}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'first_name', 'last_name', 'phone_number', 'is_staff', 'is_active')}
        ),
    )
    search_fields = ('email', 'first_name', 'last_name', 'phone_number')
    ordering = ('email',)
    filter_horizontal = ('groups', 'user_permissions',)
    inlines = [ProfileInline]


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Admin for Profile model."""
    list_display = ('user', 'village', 'role', 'is_active')
    list_filter = ('role', 'is_active', 'village')
    search_fields = ('user__email', 'village__name')
    raw_id_fields = ('user', 'village')
