from setuptools import setup

setup(
    name='mockpresence',
    version='1.0.0',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Framework :: Pytest',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Software Development :: Testing :: Mocking',
    ],
    packages=['mockpresence', 'mockpresence.realtime', 'mockpresence.types', 'mockpresence.util'],
    python_requires='>=3.8',
    install_requires=['pyee>=9.0.4,<14'],
    extras_require={
        'test': [
            'pytest>=7.1,<9',
            'mock>=4.0.3,<6',
        ],
    },
    description="A mock of realtime presence channels for use in automated tests",
)
