import os

import pytest

from jenkins_tools.config import reset_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Each test starts without JENKINS_* variables and with a fresh global config."""
    for key in list(os.environ):
        if key.startswith("JENKINS_"):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def jenkins_home(tmp_path, monkeypatch):
    home = tmp_path / "jenkins"
    home.mkdir()
    monkeypatch.setenv("JENKINS_HOME", str(home))
    return home


SECURED_CONFIG_XML = """<?xml version='1.1' encoding='UTF-8'?>
<hudson>
  <disabledAdministrativeMonitors/>
  <version>2.440.3</version>
  <numExecutors>2</numExecutors>
  <mode>NORMAL</mode>
  <useSecurity>true</useSecurity>
  <authorizationStrategy class="hudson.security.FullControlOnceLoggedInAuthorizationStrategy">
    <denyAnonymousReadAccess>true</denyAnonymousReadAccess>
  </authorizationStrategy>
  <securityRealm class="hudson.security.HudsonPrivateSecurityRealm">
    <disableSignup>true</disableSignup>
    <enableCaptcha>false</enableCaptcha>
  </securityRealm>
  <disableRememberMe>false</disableRememberMe>
  <slaveAgentPort>0</slaveAgentPort>
</hudson>
"""

UNSECURED_CONFIG_XML = """<?xml version='1.1' encoding='UTF-8'?>
<hudson>
  <version>2.440.3</version>
  <useSecurity>false</useSecurity>
  <authorizationStrategy class="hudson.security.AuthorizationStrategy$Unsecured"/>
  <securityRealm class="hudson.security.SecurityRealm$None"/>
  <slaveAgentPort>-1</slaveAgentPort>
</hudson>
"""


@pytest.fixture
def secured_xml():
    return SECURED_CONFIG_XML


@pytest.fixture
def unsecured_xml():
    return UNSECURED_CONFIG_XML
