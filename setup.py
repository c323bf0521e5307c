from setuptools import setup

setup(
    name='ircsync',
    version='0.1.0',
    packages=[
        'ircsync',
        'ircsync.utils'
    ],
    install_requires=[],
    extras_require={
        'docs': 'sphinx_rtd_theme',                     # the Sphinx theme we use
        'tests': ['pytest', 'pytest-asyncio'],          # collect and run tests
        'coverage': 'pytest-cov'                        # get test case coverage
    },
    entry_points={
        'console_scripts': [
            'ircsync = ircsync.utils.run:main',
            'ircsync-irccat = ircsync.utils.irccat:main'
        ]
    },

    keywords='irc library python3 asyncio channel tracking',
    description='An asyncio IRC client library that keeps channel membership and roles in sync.',
    license='BSD',
    python_requires='>=3.8',

    zip_safe=True,
    test_suite='tests'
)
