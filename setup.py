from setuptools import setup, find_packages

setup(
    name='bvh_sdk_python',
    version='0.1.0',
    description='BVH motion capture parser producing skeletons and keyframe tracks',
    packages=find_packages(include=['bvh_sdk_python', 'bvh_sdk_python.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
