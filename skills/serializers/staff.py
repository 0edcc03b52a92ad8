from rest_framework import serializers


class StaffCreateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
    name = serializers.CharField(max_length=200)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    nationalId = serializers.CharField(max_length=20)
    password = serializers.CharField(max_length=128)


class StaffUpdateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
    staffId = serializers.CharField()
    name = serializers.CharField(max_length=200, required=False)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    nationalId = serializers.CharField(max_length=20, required=False)
    password = serializers.CharField(max_length=128, required=False)


class StaffRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
    staffId = serializers.CharField()


class PatientCreateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
    name = serializers.CharField(max_length=200)
    nationalId = serializers.CharField(max_length=20)
    password = serializers.CharField(max_length=128)


class PatientRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
    patientId = serializers.CharField()


class StaffRecordSerializer(StaffRefSerializer):
    """Assessment or monthly work log of a staff member (free-form record)."""
    record = serializers.DictField()


class TemplateSaveSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    template = serializers.DictField()


class TemplateRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    templateId = serializers.CharField()
