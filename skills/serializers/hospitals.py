from rest_framework import serializers


class HospitalCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    province = serializers.CharField(max_length=100)
    city = serializers.CharField(max_length=100)
    supervisorName = serializers.CharField(max_length=200)
    supervisorNationalId = serializers.CharField(max_length=20)
    supervisorPassword = serializers.CharField(max_length=128)


class HospitalUpdateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    name = serializers.CharField(max_length=200, required=False)
    province = serializers.CharField(max_length=100, required=False)
    city = serializers.CharField(max_length=100, required=False)
    supervisorName = serializers.CharField(max_length=200, required=False)
    supervisorNationalId = serializers.CharField(max_length=20, required=False)
    supervisorPassword = serializers.CharField(max_length=128, required=False)


class HospitalResetSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    supervisorNationalId = serializers.CharField()
    supervisorPassword = serializers.CharField()


class DepartmentCreateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    name = serializers.CharField(max_length=200)
    managerName = serializers.CharField(max_length=200)
    managerNationalId = serializers.CharField(max_length=20)
    managerPassword = serializers.CharField(max_length=128)
    staffCount = serializers.IntegerField(min_value=0, required=False, default=0)
    bedCount = serializers.IntegerField(min_value=0, required=False, default=0)


class DepartmentUpdateSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
    name = serializers.CharField(max_length=200, required=False)
    managerName = serializers.CharField(max_length=200, required=False)
    managerNationalId = serializers.CharField(max_length=20, required=False)
    managerPassword = serializers.CharField(max_length=128, required=False)
    staffCount = serializers.IntegerField(min_value=0, required=False)
    bedCount = serializers.IntegerField(min_value=0, required=False)


class HospitalRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()


class DepartmentRefSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField()
