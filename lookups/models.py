# lookups/models.py
"""
Lookup categories and their values (household statuses, member
relationships, user roles ...). Referenced by code, not by primary key.
"""
from django.db import models


class LookupCategory(models.Model):
    code = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Lookup Category'
        verbose_name_plural = 'Lookup Categories'

    def __str__(self):
        return f"{self.name} ({self.code})"


class LookupValue(models.Model):
    category = models.ForeignKey(LookupCategory, on_delete=models.CASCADE, related_name='values')
    code = models.SlugField(max_length=100)
    name = models.CharField(max_length=200)
    color_code = models.CharField(max_length=20, blank=True, help_text="Badge colour, e.g. #16a34a")
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['category', 'sort_order', 'name']
        unique_together = ['category', 'code']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='lookups_value_active_idx'),
        ]

    def __str__(self):
        return f"{self.category.code}: {self.name}"
