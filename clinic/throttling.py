from rest_framework.throttling import SimpleRateThrottle


class _ClientIpThrottle(SimpleRateThrottle):
    """Rate limit per client address, whether or not a token was sent."""

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


class LoginRateThrottle(_ClientIpThrottle):
    scope = 'login'


class RegisterRateThrottle(_ClientIpThrottle):
    scope = 'register'
