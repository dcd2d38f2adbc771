from rest_framework import serializers
from fieldops.core.validators import validate_weekdays
from .models import Allocation


class AllocationSerializer(serializers.ModelSerializer):
    promoter_id = serializers.IntegerField(read_only=True)
    promoter_name = serializers.CharField(source='promoter.name', read_only=True)
    brand_id = serializers.IntegerField(read_only=True)
    brand_name = serializers.CharField(source='brand.name', read_only=True)
    store_id = serializers.IntegerField(read_only=True)
    store_name = serializers.CharField(source='store.chain_name', read_only=True)

    class Meta:
        model = Allocation
        fields = ['id', 'promoter_id', 'promoter_name', 'brand_id', 'brand_name', 'store_id', 'store_name',
                  'days_of_week', 'frequency_per_week', 'active', 'created_at', 'updated_at']
        read_only_fields = fields


class AllocationWriteSerializer(serializers.Serializer):
    """
    Validates allocation payloads.

    ``frequency_per_week`` defaults to the number of selected days (a 0 on
    create counts as missing) and must match it. On update, changing the days without a frequency resets the
    frequency to the new number of days.
    """
    promoter_id = serializers.IntegerField()
    brand_id = serializers.IntegerField()
    store_id = serializers.IntegerField()
    days_of_week = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)
    frequency_per_week = serializers.IntegerField(required=False, allow_null=True)
    active = serializers.BooleanField(required=False, default=True)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance is not None:
            # Promoter, brand and store are fixed once the allocation exists
            for name in ('promoter_id', 'brand_id', 'store_id'):
                self.fields.pop(name)
            self.fields['active'] = serializers.BooleanField(required=False)

    def validate_days_of_week(self, value):
        return validate_weekdays(value, allow_empty=False)

    def validate(self, attrs):
        days = attrs.get('days_of_week')
        frequency = attrs.get('frequency_per_week')

        if self.instance is None:
            # 0 or missing means "one visit per selected day"
            if not frequency:
                frequency = len(days)
        else:
            if days is None:
                days = self.instance.days_of_week or []
            elif frequency is None:
                frequency = len(days)

        if frequency is None:
            attrs.pop('frequency_per_week', None)
            return attrs

        if frequency != len(days):
            raise serializers.ValidationError({
                'frequency_per_week': f'Frequency per week ({frequency}) must match number of selected days ({len(days)})'
            })
        attrs['frequency_per_week'] = frequency
        return attrs

    def create(self, validated_data):
        return Allocation.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance
