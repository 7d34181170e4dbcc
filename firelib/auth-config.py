{'config-search-paths': ['{:user-config-path}/firelib/config.yaml',],
 'auth-variables': {
     'timeout': {
         'default': 30,
         'environment-variables': 'FIRELIB_TIMEOUT'},
     'log-level': {
         'default': 'INFO',
         'environment-variables': 'FIRELIB_LOG_LEVEL'},}}
