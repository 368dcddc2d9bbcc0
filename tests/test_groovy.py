from jenkins_tools.config import Config
from jenkins_tools.groovy import (
    groovy_list,
    groovy_string,
    misc_settings_script,
    plugins_script,
    security_recommendations_script,
)


def test_groovy_string_escaping():
    assert groovy_string("plain") == "'plain'"
    assert groovy_string("it's") == "'it\\'s'"
    assert groovy_string("a\\b") == "'a\\\\b'"
    assert groovy_string("a\nb") == "'a\\nb'"
    assert groovy_string("$HOME") == "'$HOME'"
    assert groovy_string(None) == "null"


def test_groovy_list():
    assert groovy_list(["git", "matrix-auth"]) == "['git', 'matrix-auth']"
    assert groovy_list([]) == "[]"


def test_misc_settings_defaults():
    script = misc_settings_script(Config())
    assert "def externalUrl = '' ?: null" in script
    assert "def proxyName = ''" in script
    assert "def proxyPortText = ''" in script
    assert "Jenkins.instance.slaveAgentPort = 0" in script
    # Groovy interpolation survives template rendering
    assert "'${locationConfig.url}'" in script
    assert "$external_url" not in script


def test_misc_settings_with_url_and_proxy(monkeypatch):
    monkeypatch.setenv("JENKINS_URL_EXTERNAL", "https://ci.example.com/")
    monkeypatch.setenv("JENKINS_HTTP_PROXY_SERVER", "proxy.example.com")
    monkeypatch.setenv("JENKINS_HTTP_PROXY_PORT", "3128")
    monkeypatch.setenv("JENKINS_HTTP_PROXY_NO_PROXY_HOSTS", "localhost,*.example.com")

    script = misc_settings_script(Config())

    assert "def externalUrl = 'https://ci.example.com/' ?: null" in script
    assert "def proxyName = 'proxy.example.com'" in script
    assert "def proxyPortText = '3128'" in script
    assert "def proxyNoProxyHosts = 'localhost\\n*.example.com'" in script


def test_security_recommendations():
    script = security_recommendations_script(Config())
    assert "agentProtocol.isDeprecated()" in script
    assert "setMasterKillSwitch(false)" in script
    assert "new hudson.security.csrf.DefaultCrumbIssuer(true)" in script


def test_plugins_script():
    script = plugins_script(["git", "matrix-auth"], update=True, config=Config())
    assert "def pluginNames = ['git', 'matrix-auth']" in script
    assert "def updatePlugins = true" in script
    assert "Changed: installed plugin ${name}." in script

    assert "def updatePlugins = false" in plugins_script(["git"], config=Config())


def test_plugins_script_fails_on_deploy_failure():
    script = plugins_script(["git"], config=Config())
    assert "job.status instanceof UpdateCenter.DownloadJob.Failure" in script
    assert 'throw new IllegalStateException("Failed to deploy plugin ${name}", job.status.problem)' in script
    # the failure check runs before anything is reported as changed
    assert script.index("DownloadJob.Failure") < script.index("Changed: installed plugin")
