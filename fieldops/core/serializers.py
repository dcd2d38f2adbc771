from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Agency


class AgencySerializer(serializers.ModelSerializer):
    class Meta:
        model = Agency
        fields = ['id', 'name', 'created_at', 'updated_at']


class UserSerializer(serializers.ModelSerializer):
    agency_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'role', 'agency_id', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['role', 'created_at', 'updated_at']


class AgencyRegisterSerializer(serializers.Serializer):
    """Registers a new agency together with its first agency user"""
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    agency_name = serializers.CharField(max_length=200)
    admin_name = serializers.CharField(max_length=150)

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError('User already exists')
        return value

    def validate_email(self, value):
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError('User already exists')
        return value

    def create(self, validated_data):
        agency = Agency.objects.create(name=validated_data['agency_name'])
        user = User(
            username=validated_data['username'],
            email=validated_data['email'],
            first_name=validated_data['admin_name'],
            role=User.ROLE_AGENCY,
            agency=agency,
            is_active=True,
        )
        user.set_password(validated_data['password'])
        user.save()
        return user
