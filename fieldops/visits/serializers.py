from rest_framework import serializers
from .models import Visit


class VisitSerializer(serializers.ModelSerializer):
    promoter_id = serializers.IntegerField(read_only=True)
    promoter_name = serializers.CharField(source='promoter.name', read_only=True)
    store_id = serializers.IntegerField(read_only=True)
    store_name = serializers.CharField(source='store.chain_name', read_only=True)
    store_address = serializers.CharField(source='store.address', read_only=True)
    brand_id = serializers.IntegerField(read_only=True)
    brand_name = serializers.CharField(source='brand.name', read_only=True)

    class Meta:
        model = Visit
        fields = ['id', 'promoter_id', 'promoter_name', 'store_id', 'store_name', 'store_address',
                  'brand_id', 'brand_name', 'gps_latitude', 'gps_longitude', 'timestamp', 'status',
                  'notes', 'created_at', 'updated_at']
        read_only_fields = fields


class VisitCreateSerializer(serializers.Serializer):
    """Check-in payload sent by a promoter at the store"""
    store_id = serializers.IntegerField()
    brand_id = serializers.IntegerField()
    gps_latitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-90, max_value=90)
    gps_longitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-180, max_value=180)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VisitUpdateSerializer(serializers.ModelSerializer):
    """Agency edits are limited to notes; any edit marks the visit as edited"""

    class Meta:
        model = Visit
        fields = ['notes']

    def update(self, instance, validated_data):
        instance.notes = validated_data.get('notes', instance.notes)
        instance.status = Visit.STATUS_EDITED
        instance.save(update_fields=['notes', 'status', 'updated_at'])
        return instance
