from rest_framework import serializers


class BackupRestoreSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    hospitals = serializers.ListField(child=serializers.JSONField(), required=False, allow_empty=True)
    confirm = serializers.BooleanField(default=False)

    def validate(self, attrs):
        if not attrs.get('confirm'):
            raise serializers.ValidationError({'confirm': 'Restoring replaces the current data and must be confirmed.'})
        if attrs.get('file') is None and attrs.get('hospitals') is None:
            raise serializers.ValidationError('Provide a backup file or a hospitals array.')
        return attrs
