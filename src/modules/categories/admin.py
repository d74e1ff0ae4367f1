from django.contrib import admin

from modules.categories.models import Category


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "slug", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["slug", "created_at", "updated_at"]
