from rest_framework import serializers

from ..services.materials import PERSIAN_MONTHS
from ..services.normalize import MATERIAL_TYPES, MONTHLY_STAFF, PATIENT_EDUCATION


class MaterialCreateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    materialType = serializers.ChoiceField(choices=MATERIAL_TYPES)
    file = serializers.FileField()
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')
    month = serializers.ChoiceField(choices=PERSIAN_MONTHS, required=False)
    departmentId = serializers.CharField(required=False)

    def validate(self, attrs):
        if attrs['materialType'] == MONTHLY_STAFF and not attrs.get('month'):
            raise serializers.ValidationError({'month': 'This field is required for monthly training.'})
        if attrs['materialType'] == PATIENT_EDUCATION and not attrs.get('departmentId'):
            raise serializers.ValidationError({'departmentId': 'This field is required for patient education.'})
        return attrs


class MaterialRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    materialId = serializers.CharField()


class MaterialDescriptionSerializer(MaterialRefSerializer):
    description = serializers.CharField(max_length=2000, allow_blank=True)


class BannerCreateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')
    image = serializers.FileField()


class BannerUpdateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    bannerId = serializers.CharField()
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=2000, allow_blank=True)


class BannerRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    bannerId = serializers.CharField()


class UploadRequestSerializer(serializers.Serializer):
    pathname = serializers.CharField(max_length=512)
    contentType = serializers.CharField(max_length=128)


class DeleteBlobSerializer(serializers.Serializer):
    url = serializers.CharField(error_messages={'required': 'URL is required.', 'blank': 'URL is required.'})
