from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from fieldops.catalog.models import Brand
from fieldops.core.models import User
from fieldops.core.validators import validate_weekdays
from fieldops.locations.models import Store
from .models import Promoter


class PromoterSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    agency_id = serializers.IntegerField(source='user.agency_id', read_only=True)
    brand_ids = serializers.PrimaryKeyRelatedField(source='brands', many=True, queryset=Brand.objects.all(), required=False)
    store_ids = serializers.PrimaryKeyRelatedField(source='stores', many=True, queryset=Store.objects.all(), required=False)

    class Meta:
        model = Promoter
        fields = ['id', 'user_id', 'username', 'email', 'agency_id', 'name', 'phone', 'city',
                  'availability_days', 'visit_frequency_per_brand', 'payment_per_visit', 'active',
                  'brand_ids', 'store_ids', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Brands and stores can only be assigned within the promoter's agency
        agency_id = self.context.get('agency_id')
        if agency_id is not None:
            self.fields['brand_ids'].child_relation.queryset = Brand.objects.filter(agency_id=agency_id)
            self.fields['store_ids'].child_relation.queryset = Store.objects.filter(agency_id=agency_id)

    def validate_availability_days(self, value):
        return validate_weekdays(value)

    def validate_visit_frequency_per_brand(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Expected a mapping of brand id to visits per week')
        cleaned = {}
        for brand_id, frequency in value.items():
            if isinstance(frequency, bool) or not isinstance(frequency, int) or frequency < 0:
                raise serializers.ValidationError(f'Invalid frequency for brand {brand_id}')
            cleaned[str(brand_id)] = frequency
        return cleaned


class PromoterCreateSerializer(PromoterSerializer):
    """Creates the promoter's login together with the promoter record"""
    username = serializers.CharField(source='user.username', max_length=150)
    email = serializers.EmailField(source='user.email')
    password = serializers.CharField(write_only=True, validators=[validate_password])

    class Meta(PromoterSerializer.Meta):
        fields = PromoterSerializer.Meta.fields + ['password']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        user_data = attrs.get('user', {})
        if User.objects.filter(username=user_data.get('username')).exists():
            raise serializers.ValidationError({'username': 'User already exists'})
        if User.objects.filter(email=user_data.get('email')).exists():
            raise serializers.ValidationError({'email': 'User already exists'})
        return attrs

    def create(self, validated_data):
        user_data = validated_data.pop('user')
        password = validated_data.pop('password')
        brands = validated_data.pop('brands', [])
        stores = validated_data.pop('stores', [])

        with transaction.atomic():
            user = User(
                username=user_data['username'],
                email=user_data['email'],
                role=User.ROLE_PROMOTER,
                agency_id=self.context['agency_id'],
                is_active=True,
            )
            user.set_password(password)
            user.save()
            promoter = Promoter.objects.create(user=user, **validated_data)
            promoter.brands.set(brands)
            promoter.stores.set(stores)
        return promoter
