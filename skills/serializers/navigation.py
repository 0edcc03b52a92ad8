from rest_framework import serializers

from ..services.navigation import OPENABLE_VIEWS


class SelectHospitalSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()


class SelectDepartmentSerializer(serializers.Serializer):
    departmentId = serializers.CharField()


class SelectStaffSerializer(serializers.Serializer):
    staffId = serializers.CharField()


class OpenViewSerializer(serializers.Serializer):
    view = serializers.ChoiceField(choices=OPENABLE_VIEWS)
