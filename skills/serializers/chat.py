from rest_framework import serializers


class ChatSendSerializer(serializers.Serializer):
    hospitalId = serializers.CharField()
    departmentId = serializers.CharField(required=False)
    patientId = serializers.CharField(required=False)
    text = serializers.CharField(max_length=4000, required=False, allow_blank=True, trim_whitespace=True)
    file = serializers.FileField(required=False)

    def validate(self, attrs):
        if attrs.get('patientId') and not attrs.get('departmentId'):
            raise serializers.ValidationError({'departmentId': 'This field is required with patientId.'})
        if not (attrs.get('text') or '').strip() and not attrs.get('file'):
            raise serializers.ValidationError('Message cannot be empty.')
        return attrs
