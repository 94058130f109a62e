"""Shared test fixtures for rubymine-configurator."""

import pytest

from rubymine_configurator.identity import InterpreterName
from rubymine_configurator.payloads import DataSourceFacts, InterpreterFacts

JDK_TABLE_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<application>
  <component name="ProjectJdkTable">
    <jdk version="2">
      <name value="Ruby 3.2.0 (main/app) + marker 2024-01-01" />
      <type value="RUBY_SDK" />
      <version value="3.2.0" />
      <homePath value="/opt/rubies/3.2.0/bin/ruby" />
    </jdk>
    <jdk version="2">
      <name value="Ruby 3.1.4 (other/app) + marker 2023-12-01" />
      <type value="RUBY_SDK" />
      <version value="3.1.4" />
      <homePath value="/opt/rubies/3.1.4/bin/ruby" />
    </jdk>
    <!-- added by hand -->
    <jdk version="2">
      <name value="ruby-3.3.0" />
      <type value="RUBY_SDK" />
    </jdk>
  </component>
  <component name="SomethingElse">
    <option name="flag" value="true" />
  </component>
</application>
"""

WORKSPACE_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<project version="4">
  <component name="ChangeListManager">
    <option name="HIGHLIGHT_CONFLICTS" value="true" />
  </component>
  <component name="RunManager" selected="Test::Unit/Minitest.all">
    <configuration name="all" type="TestUnitRunConfigurationType" factoryName="Test::Unit/Shoulda/Minitest">
      <module name="app" />
      <RTEST_RUN_CONFIG_SETTINGS_ID NAME="RUBY_ARGS" VALUE="-e STDOUT.sync=true" />
      <RTEST_RUN_CONFIG_SETTINGS_ID NAME="WORK DIR" VALUE="$MODULE_DIR$" />
    </configuration>
    <configuration name="other" type="TestUnitRunConfigurationType" factoryName="Test::Unit/Shoulda/Minitest">
      <RTEST_RUN_CONFIG_SETTINGS_ID NAME="RUBY_ARGS" VALUE="-w" />
    </configuration>
  </component>
</project>
"""


@pytest.fixture
def make_interpreter_facts():
    def _make(scope="main", leaf="app", version="3.2.0", date="2024-06-01", marker="marker"):
        return InterpreterFacts(
            name=InterpreterName(
                version=version, scope=scope, leaf=leaf, marker=marker, date=date
            ),
            ruby_version=version,
            ruby_path=f"/opt/rubies/{version}/bin/ruby",
            shadowenv_path="/opt/dev/bin/shadowenv",
            working_dir=f"/src/{leaf}",
        )

    return _make


@pytest.fixture
def interpreter_facts(make_interpreter_facts):
    return make_interpreter_facts()


@pytest.fixture
def data_source_facts():
    return DataSourceFacts(
        name="app@localhost",
        driver="mysql",
        host="localhost",
        port="3306",
        user="root",
        schemas=["app_development", "app_test"],
    )


@pytest.fixture
def jdk_table_xml():
    return JDK_TABLE_XML


@pytest.fixture
def workspace_xml():
    return WORKSPACE_XML
