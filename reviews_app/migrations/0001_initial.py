import django.core.validators
from django.conf import settings
from django.db import migrations, models


def rating_field(**kwargs):
    return models.PositiveSmallIntegerField(
        validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)],
        **kwargs
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ('campsites_app', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rating_overall', rating_field()),
                ('rating_cleanliness', rating_field(blank=True, null=True)),
                ('rating_staff', rating_field(blank=True, null=True)),
                ('rating_facilities', rating_field(blank=True, null=True)),
                ('rating_value', rating_field(blank=True, null=True)),
                ('rating_location', rating_field(blank=True, null=True)),
                ('reviewer_type', models.CharField(choices=[('family', 'Family'), ('couple', 'Couple'), ('solo', 'Solo'), ('group', 'Group')], max_length=10)),
                ('title', models.CharField(blank=True, default='', max_length=100)),
                ('content', models.TextField()),
                ('pros', models.TextField(blank=True, null=True)),
                ('cons', models.TextField(blank=True, null=True)),
                ('visited_at', models.DateField(blank=True, null=True)),
                ('helpful_count', models.PositiveIntegerField(default=0)),
                ('is_reported', models.BooleanField(default=False)),
                ('report_count', models.PositiveIntegerField(default=0)),
                ('is_hidden', models.BooleanField(default=False)),
                ('hidden_reason', models.TextField(blank=True, null=True)),
                ('hidden_at', models.DateTimeField(blank=True, null=True)),
                ('owner_response', models.TextField(blank=True, null=True)),
                ('owner_response_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('campsite', models.ForeignKey(help_text='The campsite being reviewed.', on_delete=models.deletion.CASCADE, related_name='reviews', to='campsites_app.campsite')),
                ('hidden_by', models.ForeignKey(blank=True, null=True, on_delete=models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(help_text='The user who wrote the review.', on_delete=models.deletion.CASCADE, related_name='campsite_reviews', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'verbose_name': 'Review',
                'verbose_name_plural': 'Reviews',
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'campsite'), name='unique_review_per_user_and_campsite'),
                    models.CheckConstraint(condition=models.Q(('rating_overall__gte', 1), ('rating_overall__lte', 5)), name='review_rating_overall_between_1_and_5'),
                ],
                'indexes': [
                    models.Index(fields=['campsite', 'is_hidden', '-created_at'], name='review_campsite_visible_idx'),
                    models.Index(fields=['is_reported', 'is_hidden', '-report_count'], name='review_report_queue_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ReviewPhoto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('url', models.URLField(max_length=500)),
                ('sort_order', models.PositiveSmallIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('review', models.ForeignKey(on_delete=models.deletion.CASCADE, related_name='photos', to='reviews_app.review')),
            ],
            options={'ordering': ['sort_order', 'id']},
        ),
        migrations.CreateModel(
            name='HelpfulVote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('review', models.ForeignKey(on_delete=models.deletion.CASCADE, related_name='helpful_votes', to='reviews_app.review')),
                ('user', models.ForeignKey(on_delete=models.deletion.CASCADE, related_name='helpful_votes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('review', 'user'), name='unique_helpful_vote_per_user')],
            },
        ),
        migrations.CreateModel(
            name='ReviewReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reason', models.CharField(choices=[('spam', 'Spam'), ('inappropriate', 'Inappropriate'), ('fake', 'Fake'), ('other', 'Other')], max_length=20)),
                ('details', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('review', models.ForeignKey(on_delete=models.deletion.CASCADE, related_name='reports', to='reviews_app.review')),
                ('user', models.ForeignKey(on_delete=models.deletion.CASCADE, related_name='review_reports', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'constraints': [models.UniqueConstraint(fields=('review', 'user'), name='unique_report_per_user')],
            },
        ),
    ]
