from django.contrib import admin

from modules.products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "slug", "price", "created_at"]
    search_fields = ["name", "slug"]
    filter_horizontal = ["categories"]
    readonly_fields = ["slug", "created_at", "updated_at"]
