from rest_framework import serializers
from .models import Store


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ['id', 'agency', 'chain_name', 'type', 'address', 'gps_latitude', 'gps_longitude',
                  'radius_meters', 'product_category', 'created_at', 'updated_at']
        read_only_fields = ['agency', 'created_at', 'updated_at']
