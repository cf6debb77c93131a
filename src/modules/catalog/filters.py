import django_filters

from modules.catalog.models import Item


class ItemFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(
        field_name="actual_price", lookup_expr="gte"
    )
    max_price = django_filters.NumberFilter(
        field_name="actual_price", lookup_expr="lte"
    )
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")
    category = django_filters.CharFilter(method="filter_category")

    class Meta:
        model = Item
        fields = ["name", "min_price", "max_price", "in_stock", "category"]

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(current_quantity__gt=0)
        return queryset.filter(current_quantity=0)

    def filter_category(self, queryset, name, value):
        # categories are stored lowercase; match the quoted JSON string
        return queryset.filter(categories__icontains=f'"{value.strip().lower()}"')
