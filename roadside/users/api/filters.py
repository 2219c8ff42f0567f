import django_filters

from roadside.users.models import User


class UserFilter(django_filters.FilterSet):
    role = django_filters.CharFilter(field_name="role", lookup_expr="iexact")
    banned = django_filters.BooleanFilter(field_name="is_banned")
    online = django_filters.BooleanFilter(field_name="is_online")

    class Meta:
        model = User
        fields = ["role", "banned", "online"]
