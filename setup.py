# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   setup.py

@Time    :   2020/9/17 7:20 下午

@Desc    :   version information

"""
from setuptools import setup

packages = \
['convman',
 'convman.channels',
 'convman.config',
 'convman.conversation',
 'convman.nlu',
 'convman.server',
 'convman.shared',
 'convman.shared.conversation',
 'convman.shared.nlu',
 'convman.shared.utils',
 'convman.utils',
 ]

package_data = \
{'': ['*']}

install_requires = [
 'aiohttp>=3.6',
 'pymongo>=3.8',
 'python-dateutil>=2.8',
 'ruamel.yaml>=0.16.5',
 'sanic>=22.9']

extras_require = {
 'test': ['pytest>=6.0',
          'sanic-testing>=22.9']}

entry_points = \
{'console_scripts': ['convman = convman.__main__:main']}

setup_kwargs = {
    'name': 'convman',
    'version': '1.0.0',
    'description': 'Messenger bot backend storing conversations and normalized NLU data',
    'long_description': '# convman',
    'author': 'convman community',
    'author_email': 'dev@convman.io',
    'maintainer': 'convman',
    'maintainer_email': 'dev@convman.io',
    'url': 'https://github.com/convman/convman',
    'packages': packages,
    'package_data': package_data,
    'install_requires': install_requires,
    'extras_require': extras_require,
    'entry_points': entry_points,
    'python_requires': '>=3.8',
}


setup(**setup_kwargs)
