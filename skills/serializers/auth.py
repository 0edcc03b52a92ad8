from rest_framework import serializers

REQUIRED_MESSAGE = 'کد ملی و رمز عبور الزامی است.'


class LoginSerializer(serializers.Serializer):
    nationalId = serializers.CharField(allow_blank=True, trim_whitespace=True,
                                       error_messages={'required': REQUIRED_MESSAGE})
    password = serializers.CharField(allow_blank=True, trim_whitespace=False,
                                     error_messages={'required': REQUIRED_MESSAGE})

    def validate(self, attrs):
        if not attrs.get('nationalId') or not attrs.get('password'):
            raise serializers.ValidationError(REQUIRED_MESSAGE)
        return attrs
