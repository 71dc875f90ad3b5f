"""
Mwaslatak Network API - Build Script

FastAPI 기반 교통 노선망 관리/조회 백엔드
"""

from setuptools import setup, find_namespace_packages


setup(
    name='mwaslatak-network',
    version='1.0.0',
    author='Mwaslatak Team',
    description='Transportation network API with metro network aggregation',
    long_description='''
    Admin-managed stations and routes for metro, bus, microbus and tram
    networks. Aggregates active routes into a station connectivity view
    with interchanges and network statistics.
    ''',
    # app/, app/api, app/auth, app/middleware 는 __init__.py 없는 namespace 패키지
    packages=find_namespace_packages(include=['app', 'app.*']),
    install_requires=[
        'fastapi>=0.110.0,<0.137',
        'uvicorn[standard]>=0.27.0',
        'pydantic[email]>=2.5.0',
        'python-dotenv>=1.0.0',
        'psycopg2-binary>=2.9.9',
        'redis>=5.0.0',
        'python-jose[cryptography]>=3.3.0',
        'passlib[bcrypt]>=1.7.4',
        # passlib 1.7.4는 bcrypt 4.1+ 의 __about__ 제거와 호환되지 않음
        'bcrypt==4.0.1',
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.23.0',
            'pytest-mock>=3.12.0',
            'pytest-cov>=4.1.0',
            'httpx>=0.26.0',
        ],
    },
    zip_safe=False,
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: GIS',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Framework :: FastAPI',
    ],
)
