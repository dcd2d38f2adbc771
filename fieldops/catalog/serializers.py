from rest_framework import serializers
from fieldops.locations.models import Store
from .models import Brand, BrandStore


class BrandStoreSerializer(serializers.ModelSerializer):
    store_id = serializers.IntegerField(source='store.id', read_only=True)
    store_name = serializers.CharField(source='store.chain_name', read_only=True)

    class Meta:
        model = BrandStore
        fields = ['store_id', 'store_name', 'visit_frequency']


class BrandSerializer(serializers.ModelSerializer):
    stores = BrandStoreSerializer(source='brand_stores', many=True, read_only=True)
    store_ids = serializers.ListField(child=serializers.IntegerField(), write_only=True, required=False)

    class Meta:
        model = Brand
        fields = ['id', 'agency', 'name', 'visit_frequency', 'price_per_visit', 'stores', 'store_ids', 'created_at', 'updated_at']
        read_only_fields = ['agency', 'created_at', 'updated_at']

    def validate_store_ids(self, value):
        """Stores must exist and belong to the brand's agency"""
        store_ids = sorted(set(value))
        agency_id = self.context.get('agency_id')
        if agency_id is None and self.instance is not None:
            agency_id = self.instance.agency_id
        stores = Store.objects.filter(id__in=store_ids)
        if agency_id is not None:
            stores = stores.filter(agency_id=agency_id)
        if stores.count() != len(store_ids):
            raise serializers.ValidationError('One or more stores not found or do not belong to your agency')
        return store_ids

    def _set_stores(self, brand, store_ids):
        BrandStore.objects.filter(brand=brand).exclude(store_id__in=store_ids).delete()
        existing = set(BrandStore.objects.filter(brand=brand).values_list('store_id', flat=True))
        BrandStore.objects.bulk_create([
            BrandStore(brand=brand, store_id=store_id)
            for store_id in store_ids if store_id not in existing
        ])

    def create(self, validated_data):
        store_ids = validated_data.pop('store_ids', None)
        brand = Brand.objects.create(**validated_data)
        if store_ids:
            self._set_stores(brand, store_ids)
        return brand

    def update(self, instance, validated_data):
        store_ids = validated_data.pop('store_ids', None)
        instance = super().update(instance, validated_data)
        if store_ids is not None:
            self._set_stores(instance, store_ids)
        return instance
