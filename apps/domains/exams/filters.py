import django_filters
from django.db.models import Q

from .models import Exam


class ExamFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    published = django_filters.BooleanFilter()
    proctored = django_filters.BooleanFilter()
    starts_after = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="gte")
    ends_before = django_filters.IsoDateTimeFilter(field_name="end_time", lookup_expr="lte")

    class Meta:
        model = Exam
        fields = ["college", "published", "proctored", "starts_after", "ends_before"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(title__icontains=value) |
            Q(description__icontains=value)
        )
